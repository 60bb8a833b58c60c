"""UIGen CLI — Typer application."""

import typer
from rich.console import Console

from uigen.version import __version__

app = typer.Typer(
    name="uigen",
    help="UIGen — virtual file system, editing tools and live preview for generated React components.",
    no_args_is_help=True,
    invoke_without_command=True,
)
console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", "-v", is_eager=True, help="Show version"),
):
    """UIGen CLI."""
    if version:
        console.print(f"UIGen v{__version__}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


# ── Preview ────────────────────────────────────────────────────────────────────
from uigen.cli.commands import preview  # noqa: E402

app.command(name="preview", help="Compile a project directory or snapshot into a preview document")(preview.preview_project)

# ── Editing tools ──────────────────────────────────────────────────────────────
from uigen.cli.commands import edit, tools  # noqa: E402

app.command(name="tools", help="List the editing tools and their commands")(tools.tools_list)
app.command(name="edit", help="Apply one tool call to a snapshot file")(edit.edit_snapshot)

# ── Server & configuration ─────────────────────────────────────────────────────
from uigen.cli.commands import config, serve  # noqa: E402

app.command(name="config", help="Show resolved configuration")(config.config_show)
app.command(name="serve", help="Start the HTTP API server")(serve.serve_api)


if __name__ == "__main__":
    app()
