"""uigen tools — List the editing tools."""

import typer
from rich.console import Console
from rich.table import Table
from rich import box

console = Console()


def tools_list(
    schema: bool = typer.Option(False, "--schema", help="Print the function-calling schema as JSON"),
):
    """List the editing tools an agent can call, with their commands.

    Example:
        uigen tools
        uigen tools --schema
    """
    from uigen.tools.registry import build_tool_registry
    from uigen.vfs import VirtualFileSystem

    registry = build_tool_registry(VirtualFileSystem())

    if schema:
        console.print_json(data=registry.get_schema_for_llm())
        return

    tool_defs = registry.list_tools()
    risk_color = {"low": "green", "medium": "yellow", "high": "red"}

    table = Table(
        box=box.ROUNDED,
        header_style="bold dim",
        show_lines=False,
        title=f"[bold]{len(tool_defs)} Editing Tools[/bold]",
    )
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description", overflow="fold")
    table.add_column("Commands", overflow="fold")
    table.add_column("Risk", no_wrap=True)

    for tool in sorted(tool_defs, key=lambda t: t.name):
        risk = tool.risk_level.value if hasattr(tool.risk_level, "value") else str(tool.risk_level)
        color = risk_color.get(risk.lower(), "white")
        commands = tool.parameters.get("properties", {}).get("command", {}).get("enum", [])
        table.add_row(
            tool.name,
            f"[dim]{tool.description}[/dim]",
            ", ".join(commands),
            f"[{color}]{risk}[/{color}]",
        )

    console.print()
    console.print(table)
    console.print()
