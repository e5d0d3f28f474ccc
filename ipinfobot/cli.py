"""Click CLI with Rich output."""

from __future__ import annotations

import json as json_lib
import logging
import sys

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from . import __version__
from .cache import clear_cache, get_stats, init_cache, purge_expired
from .config import (
    BOT_TOKEN_ENV,
    IPINFO_TOKEN_ENV,
    MAX_PENDING_QUERIES,
    WORKER_COUNT,
)
from .dispatch import Dispatcher
from .ipinfo import IPInfoClient
from .models import Query
from .workers import OverflowPolicy

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
    )
    # urllib3 logs every request at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool):
    """ipinfobot: Telegram inline bot for IP and ASN lookups."""
    load_dotenv()
    _configure_logging(verbose)
    init_cache()


@cli.command()
@click.option(
    "--token", envvar=BOT_TOKEN_ENV, required=True, help="Telegram bot token."
)
@click.option(
    "--ipinfo-token", envvar=IPINFO_TOKEN_ENV, default=None, help="ipinfo.io API token."
)
@click.option(
    "--workers", default=WORKER_COUNT, show_default=True, help="Lookup worker threads."
)
@click.option(
    "--queue-size",
    default=MAX_PENDING_QUERIES,
    show_default=True,
    help="Queries allowed to wait for a worker.",
)
@click.option(
    "--overflow",
    type=click.Choice([p.value for p in OverflowPolicy]),
    default=OverflowPolicy.FALLBACK.value,
    show_default=True,
    help="What to do with queries that arrive while the queue is full.",
)
def run(
    token: str, ipinfo_token: str | None, workers: int, queue_size: int, overflow: str
):
    """Log in to Telegram and answer inline queries until interrupted."""
    from .bot import IpInfoBot
    from .telegram import TelegramClient, TelegramError

    bot = IpInfoBot(
        IPInfoClient(ipinfo_token),
        workers=workers,
        max_pending=queue_size,
        policy=OverflowPolicy(overflow),
    )

    try:
        bot.login(TelegramClient(token))
    except TelegramError:
        logger.exception("Unable to login to Telegram Bot! Shutting down...")
        sys.exit(1)

    try:
        bot.run()
    except KeyboardInterrupt:
        bot.stop()
        logger.info("Interrupted, stopping.")


@cli.command()
@click.argument("query")
@click.option(
    "--ipinfo-token", envvar=IPINFO_TOKEN_ENV, default=None, help="ipinfo.io API token."
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def lookup(query: str, ipinfo_token: str | None, as_json: bool):
    """Show the inline cards the bot would answer QUERY with."""
    dispatcher = Dispatcher(IPInfoClient(ipinfo_token))
    results = dispatcher.handle(Query(id="cli", text=query))

    if as_json:
        data = [
            {
                "id": r.id,
                "kind": r.kind.name.lower(),
                "title": r.title,
                "description": r.description,
                "text": r.document.to_plain() if r.document else None,
                "point": (
                    {"latitude": r.point.latitude, "longitude": r.point.longitude}
                    if r.point
                    else None
                ),
            }
            for r in results
        ]
        click.echo(json_lib.dumps(data, indent=2))
        return

    for r in results:
        if r.point is not None:
            body = f"{r.point.latitude}, {r.point.longitude}"
        else:
            body = r.document.to_plain().rstrip()
        subtitle = f"[dim]{r.description}[/dim]" if r.description else None
        title = f"[bold]{r.title}[/bold] (#{r.id})"
        console.print(Panel(Text(body), title=title, subtitle=subtitle))


@cli.command("cache-stats")
def cache_stats():
    """Show response cache statistics."""
    data = get_stats()

    if data["entries"] == 0:
        console.print("[yellow]Cache is empty.[/yellow]")
        return

    table = Table(title="Response Cache", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value")

    table.add_row("Entries", str(data["entries"]))
    table.add_row("Fresh", str(data["fresh"]))
    table.add_row("Expired", str(data["expired"]))

    table.add_section()
    for kind, count in sorted(data["by_kind"].items()):
        table.add_row(f"  {kind.upper()}", str(count))

    console.print(table)


@cli.command("cache-clear")
@click.option("--expired", is_flag=True, help="Only remove expired entries.")
def cache_clear(expired: bool):
    """Remove cached lookup responses."""
    removed = purge_expired() if expired else clear_cache()
    console.print(f"[green]Removed {removed} cached response(s).[/green]")
