"""Crawl command for actionscout CLI."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from actionscout.actions.classifier import HeuristicActionClassifier
from actionscout.actions.llm_classifier import get_llm_classifier
from actionscout.actions.models import Action
from actionscout.core.config import get_settings
from actionscout.crawler.browser import BrowserManager
from actionscout.crawler.export import ResultExporter
from actionscout.crawler.models import CrawlConfig, CrawlReport
from actionscout.crawler.page_crawler import PageCrawler
from actionscout.crawler.site_crawler import ActionCrawler
from actionscout.db.session import close_db, get_session_factory, init_db
from actionscout.storage.action_storage import ActionStorage

console = Console()


def create_actions_table(actions: list[Action]) -> Table:
    """Create a table listing discovered actions."""
    table = Table(title="Discovered Actions")
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("Confidence", justify="right")
    table.add_column("Elements", justify="right")
    table.add_column("URL", style="blue")

    for action in actions:
        color = "green" if action.confidence >= 0.8 else "yellow"
        table.add_row(
            str(action.type),
            action.name,
            f"[{color}]{action.confidence:.2f}[/{color}]",
            str(len(action.elements)),
            action.url,
        )

    return table


async def run_crawl(
    url: str,
    max_pages: int,
    delay: float,
    use_llm: bool,
    store: bool,
    output_dir: Path | None,
    headless: bool,
) -> CrawlReport:
    """Crawl ``url`` in a fresh browser and return the report."""
    settings = get_settings()
    config = CrawlConfig(
        headless=headless,
        viewport_width=settings.viewport_width,
        viewport_height=settings.viewport_height,
        navigation_timeout_ms=settings.navigation_timeout_ms,
        wait_until=settings.wait_until,
    )

    storage = None
    if store:
        await init_db()
        storage = ActionStorage(get_session_factory())

    try:
        async with BrowserManager(config) as browser:
            page = await browser.new_page()
            crawler = ActionCrawler(
                PageCrawler(page, wait_until=config.wait_until),
                classifier=HeuristicActionClassifier(settings.classifier_thresholds()),
                llm_classifier=get_llm_classifier() if use_llm else None,
                storage=storage,
                exporter=ResultExporter(output_dir) if output_dir else None,
                page_delay_seconds=delay,
            )
            return await crawler.run(url, max_pages)
    finally:
        if store:
            await close_db()


def crawl(
    url: str = typer.Argument(..., help="URL to start crawling from."),
    max_pages: int | None = typer.Option(
        None,
        "--max-pages",
        "-n",
        min=1,
        help="Maximum number of pages to visit. Defaults to CRAWL_MAX_PAGES.",
    ),
    delay: float | None = typer.Option(
        None,
        "--delay",
        "-d",
        min=0,
        help="Seconds to wait between pages. Defaults to CRAWL_PAGE_DELAY_SECONDS.",
    ),
    llm: bool = typer.Option(
        True,
        "--llm/--no-llm",
        help="Also classify pages with the LLM (requires ANTHROPIC_API_KEY).",
    ),
    store: bool = typer.Option(
        False,
        "--store/--no-store",
        help="Persist discovered actions to the database.",
    ),
    output_dir: Path | None = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory to write per-page JSON results to.",
    ),
    headed: bool = typer.Option(
        False,
        "--headed",
        help="Show the browser window.",
    ),
    format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: text or json.",
    ),
) -> None:
    """Crawl a website and list the user actions found on it.

    Examples:

        actionscout crawl https://example.com

        actionscout crawl https://example.com --max-pages 5 --no-llm

        actionscout crawl https://example.com --store --output-dir ./results
    """
    settings = get_settings()
    max_pages = max_pages or settings.crawl_max_pages
    delay = settings.crawl_page_delay_seconds if delay is None else delay
    headless = settings.crawl_headless and not headed

    if format != "json":
        console.print(
            Panel(
                f"URL: [blue]{url}[/blue]\n"
                f"Max pages: {max_pages}\n"
                f"LLM classification: {'on' if llm else 'off'}",
                title="Action Crawl",
                border_style="blue",
            )
        )

    try:
        report = asyncio.run(run_crawl(url, max_pages, delay, llm, store, output_dir, headless))
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    if format == "json":
        console.print(
            json.dumps(
                {
                    "start_url": report.start_url,
                    "visited_urls": report.visited_urls,
                    "actions": [action.to_dict() for action in report.actions],
                    "errors": report.errors,
                    "duration_seconds": report.duration_seconds,
                },
                indent=2,
            )
        )
        return

    if report.actions:
        console.print(create_actions_table(report.actions))
    else:
        console.print("[yellow]No actions found.[/yellow]")

    for error in report.errors:
        console.print(f"[red]Error:[/red] {error}")

    console.print(
        f"\nCrawled [bold]{report.total_pages}[/bold] of {len(report.visited_urls)} pages, "
        f"found [bold]{len(report.actions)}[/bold] actions in {report.duration_seconds}s"
    )
