"""Server CLI commands."""

import typer
import uvicorn
from rich.panel import Panel

from src.user_sync.runtime.context import get_config

from .utils import console


def serve(
    host: str | None = typer.Option(None, help="Host to bind to (default from config)"),
    port: int | None = typer.Option(None, help="Port to bind to (default from config)"),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
) -> None:
    """🚀 Run the webhook receiver with uvicorn."""
    config = get_config()
    host = host or config.app.host
    port = port or config.app.port

    console.print(
        Panel.fit(
            "[bold green]Starting User Sync Service[/bold green]",
            border_style="green",
        )
    )
    console.print(f"[blue]Webhook endpoint:[/blue] http://{host}:{port}/api/webhooks/clerk")
    console.print("[dim]Press Ctrl+C to stop the server[/dim]")

    uvicorn.run(
        "src.user_sync.api.http.app:app",
        host=host,
        port=port,
        reload=reload,
        log_level=config.logging.level.lower(),
    )
