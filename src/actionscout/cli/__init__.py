"""actionscout CLI for discovering user actions on websites."""

from __future__ import annotations

import asyncio

import logfire
import typer
from rich.console import Console

from actionscout import __version__
from actionscout.cli.commands import actions, crawl
from actionscout.core.config import get_settings
from actionscout.db.session import close_db, init_db

app = typer.Typer(
    name="actionscout",
    help="Discover the user actions a website offers",
    no_args_is_help=True,
)
console = Console()

# Add commands
app.command("crawl")(crawl.crawl)
app.command("actions")(actions.actions)


@app.command("init-db")
def init_database() -> None:
    """Create the database tables."""

    async def _init() -> None:
        try:
            await init_db()
        finally:
            await close_db()

    try:
        asyncio.run(_init())
    except Exception as e:
        console.print(f"[red]Error:[/red] Could not initialize database: {e}")
        raise typer.Exit(1) from None

    console.print("[green]Database initialized.[/green]")


@app.command()
def version() -> None:
    """Show the CLI version."""
    console.print(f"actionscout version {__version__}")


def main() -> None:
    """Main entry point for the CLI."""
    logfire.configure(
        service_name="actionscout",
        environment=get_settings().environment,
    )
    app()


__all__ = ["app", "main"]
