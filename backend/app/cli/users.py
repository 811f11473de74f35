"""Needledrop CLI - User account commands."""
import typer
from rich.console import Console
from rich.table import Table
from rich.prompt import Confirm

app = typer.Typer()
console = Console()


@app.command("create")
def create_user(
    username: str = typer.Argument(..., help="Username for new user"),
    email: str = typer.Argument(..., help="Email address"),
    password: str = typer.Option(None, "--password", "-p", help="Password (will prompt if not provided)"),
):
    """Create a new user."""
    from app.database import SessionLocal
    from app.exceptions import ConflictError
    from app.services.auth import AuthService

    # Get password
    if not password:
        password = typer.prompt("Password", hide_input=True)
        password_confirm = typer.prompt("Confirm password", hide_input=True)
        if password != password_confirm:
            console.print("[red]Passwords do not match[/red]")
            raise typer.Exit(1)

    db = SessionLocal()
    try:
        try:
            user = AuthService(db).create_user(username, password, email)
        except ConflictError as e:
            console.print(f"[red]{e.message}[/red]")
            raise typer.Exit(1)

        console.print(f"[green]User '{user.username}' created (id {user.id})[/green]")
    finally:
        db.close()


@app.command("list")
def list_users():
    """List all users with follower counts."""
    from sqlalchemy import select
    from app.database import SessionLocal
    from app.models.user import User
    from app.services.social import SocialService

    db = SessionLocal()
    try:
        social = SocialService(db)
        users = db.scalars(select(User).order_by(User.username)).all()

        table = Table(title="Users")
        table.add_column("ID", style="dim")
        table.add_column("Username", style="cyan")
        table.add_column("Followers", justify="right")
        table.add_column("Following", justify="right")
        table.add_column("Created")

        for u in users:
            table.add_row(
                str(u.id),
                u.username,
                str(social.follower_count(u.id)),
                str(social.following_count(u.id)),
                str(u.created_at.date()) if u.created_at else "",
            )

        console.print(table)
    finally:
        db.close()


@app.command("delete")
def delete_user(
    username: str = typer.Argument(..., help="Username to delete"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Delete a user. Their ratings and reviews are kept anonymously."""
    from sqlalchemy import select
    from app.database import SessionLocal
    from app.models.user import User
    from app.services.account import AccountDeletionService
    from app.services.sessions import SessionStore
    from app.config import settings

    db = SessionLocal()
    try:
        target = db.scalar(select(User).where(User.username == username))
        if not target:
            console.print(f"[red]User '{username}' not found[/red]")
            raise typer.Exit(1)

        if not force:
            if not Confirm.ask(f"Delete user '{username}'?"):
                console.print("Cancelled")
                return

        sessions = SessionStore.from_url() if settings.session_tracking else None
        result = AccountDeletionService(db, sessions=sessions).delete_account(target.id)

        console.print(f"[green]User '{username}' deleted[/green]")
        console.print(
            f"  Kept {result.ratings_count} ratings and {result.reviews_count} reviews, "
            f"removed {result.follows_count} follows"
        )
        if result.sessions_revoked is not None:
            console.print(f"  Revoked {result.sessions_revoked} sessions")
    finally:
        db.close()
