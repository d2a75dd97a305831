"""Actions command for actionscout CLI."""

from __future__ import annotations

import asyncio
import json
from dataclasses import asdict

import typer
from rich.console import Console
from rich.table import Table

from actionscout.actions.models import ActionType
from actionscout.db.session import close_db, get_session_factory
from actionscout.storage.action_storage import ActionStorage, StoredAction

console = Console()


def create_stored_actions_table(actions: list[StoredAction]) -> Table:
    """Create a table listing stored actions."""
    table = Table(title="Stored Actions")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Type", style="bold")
    table.add_column("Name")
    table.add_column("Confidence", justify="right")
    table.add_column("URL", style="blue")

    for action in actions:
        table.add_row(
            action.id[:8] + "...",
            action.type,
            action.name,
            f"{action.confidence:.2f}",
            action.url,
        )

    return table


async def query_actions(
    url: str | None,
    action_type: ActionType | None,
    limit: int,
) -> list[StoredAction]:
    """Run one storage query and close the connection pool."""
    storage = ActionStorage(get_session_factory())
    try:
        if url:
            return (await storage.get_actions_by_url(url))[:limit]
        if action_type:
            return await storage.get_actions_by_type(str(action_type), limit)
        return []
    finally:
        await close_db()


def actions(
    url: str | None = typer.Option(
        None,
        "--url",
        "-u",
        help="Show actions discovered on this page URL.",
    ),
    action_type: ActionType | None = typer.Option(
        None,
        "--type",
        "-t",
        case_sensitive=False,
        help="Show actions of this type.",
    ),
    limit: int = typer.Option(
        10,
        "--limit",
        "-n",
        min=1,
        help="Maximum number of actions to show.",
    ),
    format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: text or json.",
    ),
) -> None:
    """Query stored actions by page URL or by type.

    Examples:

        actionscout actions --url https://example.com/

        actionscout actions --type login --limit 20
    """
    if not (url or action_type):
        console.print("[red]Error:[/red] Specify --url or --type.")
        raise typer.Exit(1)

    try:
        results = asyncio.run(query_actions(url, action_type, limit))
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    if not results:
        console.print("[yellow]No actions found.[/yellow]")
        return

    if format == "json":
        console.print(json.dumps([asdict(action) for action in results], indent=2))
    else:
        console.print(create_stored_actions_table(results))
