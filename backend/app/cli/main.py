"""Needledrop CLI - Main entry point."""
import typer
from rich.console import Console
from rich.table import Table

from app.cli import users, feed

app = typer.Typer(
    name="needledrop",
    help="Needledrop - Social music logging",
    add_completion=True,
)

console = Console()

# Add subcommands
app.add_typer(users.app, name="user", help="User account commands")
app.add_typer(feed.app, name="feed", help="Activity feed commands")
app.add_typer(feed.activity_app, name="activity", help="Activity log commands")


@app.command()
def version():
    """Show version information."""
    from app import __version__
    console.print(f"Needledrop v{__version__}")


@app.command()
def status():
    """Check system status."""
    from app.config import settings

    table = Table(title="Needledrop Status")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")

    # Check database
    try:
        from sqlalchemy import text
        from app.database import engine
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        table.add_row("Database", "Connected")
    except Exception as e:
        table.add_row("Database", f"[red]Error: {e}[/red]")

    # Check redis
    try:
        import redis
        redis.from_url(settings.redis_url).ping()
        table.add_row("Redis", "Connected")
    except Exception as e:
        colour = "red" if settings.session_tracking else "yellow"
        table.add_row("Redis", f"[{colour}]Error: {e}[/{colour}]")

    # Check catalog credentials
    if settings.spotify_client_id and settings.spotify_client_secret:
        table.add_row("Spotify", "Configured")
    else:
        table.add_row("Spotify", "[yellow]Credentials missing[/yellow]")

    console.print(table)


if __name__ == "__main__":
    app()
