"""uigen serve — Start the HTTP API server."""

from typing import Optional

import typer
from rich.console import Console

console = Console()


def serve_api(
    host: Optional[str] = typer.Option(None, help="Host to bind to (default: UIGEN_HOST)"),
    port: Optional[int] = typer.Option(None, help="Port to listen on (default: UIGEN_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
):
    """Start the UIGen API server."""
    import uvicorn
    from uigen.config import config

    host = host or config.host
    port = port or config.port
    console.print(f"[green]Starting UIGen server on {host}:{port}[/green]")
    uvicorn.run("uigen.api.main:app", host=host, port=port, reload=reload, log_level=config.log_level.lower())
