"""uigen config — Show resolved UIGen configuration."""

from rich.console import Console
from rich.table import Table
from rich import box

console = Console()


def config_show():
    """Show the resolved UIGen configuration.

    Reads from environment variables and .env file.

    Example:
        uigen config
    """
    from uigen.config import UIGenConfig
    cfg = UIGenConfig()

    table = Table(
        box=box.ROUNDED,
        header_style="bold dim",
        show_lines=False,
        title="[bold]UIGen Configuration[/bold]",
    )
    table.add_column("Key", style="cyan", width=30)
    table.add_column("Value", width=55)
    table.add_column("Env Var", style="dim", width=35)

    sections = [
        ("App", ["app_name", "debug", "log_level"]),
        ("Server", ["host", "port", "cors_origins", "max_sessions"]),
        ("Module Resolution", ["preview_alias", "preview_entry_candidates"]),
        ("Runtime Libraries", [
            "preview_runtime_urls", "preview_cdn_base_url",
            "preview_allow_cdn_packages", "preview_tailwind_url",
        ]),
        ("Document", ["preview_title", "preview_module_base_url"]),
    ]

    first = True
    for section_name, fields in sections:
        if not first:
            table.add_row("", "", "")
        first = False
        table.add_row(f"[bold dim]── {section_name} ──[/bold dim]", "", "")
        for attr in fields:
            val = getattr(cfg, attr, None)
            display = "[dim](not set)[/dim]" if val is None else str(val)
            table.add_row(f"  {attr}", display, f"UIGEN_{attr.upper()}")

    console.print()
    console.print(table)
    console.print()
    console.print("[dim]Source: environment variables + .env file (prefix: UIGEN_)[/dim]")
