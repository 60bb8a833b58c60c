"""uigen edit — Apply one editing tool call to a snapshot file."""

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

console = Console()


def edit_snapshot(
    snapshot: Path = typer.Argument(..., help="Serialized project (.json); created if missing"),
    tool: str = typer.Argument(..., help="Tool name: str_replace_editor or file_manager"),
    params: str = typer.Option("{}", "--params", "-p", help="Tool parameters as a JSON object"),
):
    """Run one tool call against a snapshot and write the snapshot back.

    Example:
        uigen edit project.json str_replace_editor \\
            --params '{"command": "create", "path": "/App.jsx", "file_text": "..."}'
    """
    from uigen.tools.executor import ToolExecutor
    from uigen.tools.registry import build_tool_registry
    from uigen.vfs import VirtualFileSystem
    from uigen.cli.commands.preview import load_project

    try:
        tool_params = json.loads(params)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"--params is not valid JSON: {exc}")
    if not isinstance(tool_params, dict):
        raise typer.BadParameter("--params must be a JSON object")

    vfs = load_project(snapshot) if snapshot.exists() else VirtualFileSystem()
    executor = ToolExecutor(build_tool_registry(vfs), vfs=vfs)
    before = vfs.refresh_counter
    result, error = asyncio.run(executor.execute(tool, tool_params))

    if error:
        console.print(f"[red]{error}: {tool}[/red]")
        raise typer.Exit(1)

    if isinstance(result, dict):
        failed = not result.get("success")
        text = result.get("message") or result.get("error") or ""
    else:
        failed = result.startswith("Error")
        text = result
    if failed:
        console.print(f"[red]{escape(text)}[/red]")
    else:
        console.print(text, markup=False, highlight=False)

    if vfs.refresh_counter != before:
        snapshot.write_text(vfs.to_json(), encoding="utf-8")
        console.print(f"[dim]Saved {snapshot} (refresh counter {vfs.refresh_counter})[/dim]")
    if failed:
        raise typer.Exit(1)
