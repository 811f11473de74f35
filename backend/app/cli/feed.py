"""Needledrop CLI - Feed and activity commands."""
import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer()
activity_app = typer.Typer()
console = Console()


@app.command("show")
def show_feed(
    username: str = typer.Argument(..., help="Whose feed to show"),
    page: int = typer.Option(1, "--page", "-p", help="Page number"),
    limit: int = typer.Option(20, "--limit", "-l", help="Items per page"),
):
    """Show a user's activity feed."""
    from sqlalchemy import select
    from app.database import SessionLocal
    from app.exceptions import NeedledropError
    from app.models.user import User
    from app.services.feed import FeedService

    db = SessionLocal()
    try:
        viewer = db.scalar(select(User).where(User.username == username))
        if not viewer:
            console.print(f"[red]User '{username}' not found[/red]")
            raise typer.Exit(1)

        try:
            result = FeedService(db).feed(viewer.id, page=page, limit=limit)
        except NeedledropError as e:
            console.print(f"[red]{e.message}[/red]")
            raise typer.Exit(1)

        if result.is_empty:
            console.print(f"[yellow]{result.message}[/yellow]")
            return

        table = Table(title=f"Feed for {username} (page {result.page})")
        table.add_column("When", style="dim")
        table.add_column("User", style="cyan")
        table.add_column("Type")
        table.add_column("Album")
        table.add_column("Details")

        for item in result.items:
            if item.type == "rating":
                details = "*" * item.data.rating
            else:
                details = item.data.content[:60]
            table.add_row(
                item.created_at.strftime("%Y-%m-%d %H:%M"),
                item.user.username if item.user else "[dim]deleted user[/dim]",
                item.type,
                f"{item.album.artist} - {item.album.name}",
                details,
            )

        console.print(table)
        if result.has_more:
            console.print(f"[dim]More: --page {result.page + 1}[/dim]")
    finally:
        db.close()


@activity_app.command("project")
def project_activities():
    """Create missing activities for ratings and reviews."""
    from app.database import SessionLocal
    from app.services.activity import ActivityService

    db = SessionLocal()
    try:
        projected = ActivityService(db).project_missing()
        console.print(
            f"[green]Projected {projected['rating']} rating and "
            f"{projected['review']} review activities[/green]"
        )
    finally:
        db.close()
