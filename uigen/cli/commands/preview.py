"""uigen preview — Compile a project into a standalone preview document."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from rich import box

from uigen.exceptions import UIGenError

console = Console()

_SKIP_DIRS = {"node_modules", ".git", "dist", "build", "__pycache__"}
_STATE_COLOR = {"ready": "green", "no_entry": "yellow", "empty": "yellow", "welcome": "yellow"}


def load_project(source: Path):
    """A VFS from a project directory or a serialized ``snapshot.json``.

    Raises:
        typer.BadParameter: if ``source`` is neither
    """
    from uigen.vfs import VirtualFileSystem

    if source.is_dir():
        files = {}
        for path in sorted(source.rglob("*")):
            relative = path.relative_to(source)
            if not path.is_file() or any(part in _SKIP_DIRS or part.startswith(".") for part in relative.parts):
                continue
            try:
                files["/" + relative.as_posix()] = path.read_text(encoding="utf-8")
            except UnicodeDecodeError:
                continue
        return VirtualFileSystem.from_files(files)
    if source.is_file():
        try:
            return VirtualFileSystem.from_json(source.read_text(encoding="utf-8"))
        except (ValueError, UIGenError) as exc:
            raise typer.BadParameter(f"{source} is not a valid snapshot: {exc}")
    raise typer.BadParameter(f"{source} does not exist")


def preview_project(
    source: Path = typer.Argument(..., help="Project directory or snapshot .json file"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Write the HTML document here"),
    dark: bool = typer.Option(False, "--dark", help="Render with the dark theme"),
    entry: Optional[str] = typer.Option(None, "--entry", help="Entry module path, e.g. /App.jsx"),
    strict: bool = typer.Option(False, "--strict", help="Fail on unresolved imports"),
):
    """Compile a project into a self-contained preview document.

    Prints the resulting state and every diagnostic. Exits with status 1
    when there is nothing to mount, or with ``--strict`` when an import
    did not resolve.

    Example:
        uigen preview ./my-app --out preview.html --dark
    """
    from uigen.config import config
    from uigen.logging_setup import configure_logging
    from uigen.preview.pipeline import build_preview, raise_for_state

    configure_logging(config.log_level)
    vfs = load_project(source)
    result = build_preview(vfs.snapshot(), entry_path=entry, dark_mode=dark)

    color = _STATE_COLOR.get(result.state.value, "white")
    console.print(f"[bold]State:[/bold] [{color}]{result.state.value}[/{color}]")
    if result.entry_point:
        console.print(f"[bold]Entry:[/bold] [cyan]{result.entry_point}[/cyan]")
    if result.message:
        console.print(f"[dim]{result.message}[/dim]")

    if result.errors:
        table = Table(box=box.ROUNDED, header_style="bold dim", title="[bold]Diagnostics[/bold]")
        table.add_column("Kind", style="red", width=18)
        table.add_column("File", style="cyan")
        table.add_column("Message")
        for error in result.errors:
            table.add_row(error.kind.value, error.path, error.message)
        console.print(table)

    if out is not None and result.html:
        out.write_text(result.html, encoding="utf-8")
        console.print(f"[green]Wrote {out}[/green]")

    try:
        raise_for_state(result, strict=strict)
    except UIGenError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)
