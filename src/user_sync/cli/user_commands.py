"""Mirrored user inspection CLI commands."""

import typer
from rich.table import Table

from src.user_sync.core.services import DbSessionService
from src.user_sync.entities.core.user import User, UserRepository

from .utils import console

users_app = typer.Typer(help="Inspect users mirrored from the identity provider")


def _user_table(title: str, users: list[User]) -> Table:
    table = Table(title=title)
    table.add_column("External ID", style="cyan")
    table.add_column("Username", style="green")
    table.add_column("Phone", style="blue")
    table.add_column("Profile Image", style="magenta", overflow="fold")
    table.add_column("Updated", style="yellow")

    for user in users:
        table.add_row(
            user.external_user_id,
            user.username or "-",
            user.phone_number or "-",
            user.profile_image_url or "-",
            user.updated_at.strftime("%Y-%m-%d %H:%M:%S"),
        )
    return table


@users_app.command("list")
def list_users(
    limit: int = typer.Option(100, "--limit", "-l", help="Maximum number of users to show"),
    offset: int = typer.Option(0, "--offset", "-o", help="Number of users to skip"),
) -> None:
    """List mirrored users, oldest first."""
    try:
        with DbSessionService().session_scope() as session:
            users = UserRepository(session).list_all(limit=limit, offset=offset)
    except Exception as e:
        console.print(f"[red]❌ Failed to list users: {e}[/red]")
        raise typer.Exit(code=1) from e

    if not users:
        console.print("[yellow]No users found[/yellow]")
        return

    console.print(_user_table("Mirrored users", users))
    console.print(f"\n[green]Found {len(users)} users[/green]")


@users_app.command("show")
def show_user(
    external_user_id: str = typer.Argument(..., help="Identity provider user id"),
) -> None:
    """Show a single mirrored user."""
    try:
        with DbSessionService().session_scope() as session:
            user = UserRepository(session).get_by_external_id(external_user_id)
    except Exception as e:
        console.print(f"[red]❌ Failed to load user: {e}[/red]")
        raise typer.Exit(code=1) from e

    if user is None:
        console.print(f"[red]❌ User '{external_user_id}' not found[/red]")
        raise typer.Exit(code=1)

    console.print(_user_table(f"User '{external_user_id}'", [user]))
