"""Database management CLI commands."""

import typer

from src.user_sync.core.services import DbManageService

from .utils import console

db_app = typer.Typer(help="Manage the user sync database")


@db_app.command("init")
def init() -> None:
    """Create the database tables.

    Schema ownership normally sits with the database service; this is for
    local development and throwaway environments.
    """
    try:
        DbManageService().create_all()
    except Exception as e:
        console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
        raise typer.Exit(code=1) from e

    console.print("[green]✅ Database tables created[/green]")
