# promo_publisher/cli/runner.py

"""Command runners behind ``main.py``: service, one-shot run, reports."""

import asyncio
import logging

from rich.console import Console
from rich.table import Table

from promo_publisher.config.settings import Settings
from promo_publisher.services.pipeline import PipelineResult, PromoPipeline
from promo_publisher.services.scheduler import PublishScheduler
from promo_publisher.storage.posted_products_db import PostedProductsDB

logger = logging.getLogger("promo_publisher.cli")

# Stderr console for status messages so stdout stays clean
_err = Console(stderr=True)


def _print_summary(result: PipelineResult) -> None:
    """Render a one-run summary to stderr."""
    colour = "green" if result.success else "red"
    _err.print(
        f"[{colour}]{'✓' if result.success else '✗'} "
        f"keyword='{result.keyword}' fetched={result.fetched_count} "
        f"candidates={result.candidate_count} new={result.new_count} "
        f"posts={result.count}[/{colour}]"
    )
    for error_msg in result.errors:
        _err.print(f"[red]Error: {error_msg}[/red]")


async def run_once() -> int:
    """Run the pipeline once; exit code 0 on success, 1 otherwise."""
    pipeline = PromoPipeline(store=PostedProductsDB())
    _err.print("[bold]Running promo pipeline once...[/bold]")
    result = await pipeline.run()
    _print_summary(result)
    return 0 if result.success else 1


async def run_service() -> None:
    """Start the scheduler loop; returns only when cancelled."""
    store = PostedProductsDB()
    pipeline = PromoPipeline(store=store)
    scheduler = PublishScheduler(pipeline.run)
    channels = ", ".join(p.channel for p in pipeline.publishers) or "none"
    _err.print(
        f"[bold]Promo publisher service started[/bold] "
        f"[dim]every {Settings.SCHEDULE_INTERVAL_MINUTES:g} min, "
        f"channels: {channels}[/dim]"
    )
    await scheduler.serve()


def show_recent(limit: int, hours_ago: float) -> int:
    """Print recently posted products as a Rich table."""
    db = PostedProductsDB()
    recent = db.get_recently_posted(limit=limit, hours_ago=hours_ago)
    if not recent.success:
        _err.print(f"[red]{recent.error}[/red]")
        return 1
    if not recent.products:
        _err.print(
            f"[yellow]Nothing posted in the last {hours_ago:g}h.[/yellow]"
        )
        return 0

    table = Table(
        title=f"Posted in the last {hours_ago:g}h",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Posted at", style="dim")
    table.add_column("Product", max_width=50)
    table.add_column("Price", justify="right", style="green")
    table.add_column("TG", justify="center")
    table.add_column("WA", justify="center")
    table.add_column("X", justify="center")
    table.add_column("Link", overflow="fold", style="dim")

    def flag(value: bool) -> str:
        return "✅" if value else "—"

    for p in recent.products:
        table.add_row(
            p.posted_at.strftime("%Y-%m-%d %H:%M"),
            p.product_name[:50],
            f"R$ {p.product_price:,.2f}",
            flag(p.posted_telegram),
            flag(p.posted_whatsapp),
            flag(p.posted_twitter),
            p.product_link,
        )

    Console().print(table)
    return 0


async def run_health_check() -> int:
    """Probe sources and report channel configuration."""
    from promo_publisher.services.health_checker import HealthChecker

    _err.print("[bold]Running source health check...[/bold]")
    checker = HealthChecker()
    results = await checker.check_sources()

    table = Table(
        title="Source Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Source", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
        else:
            status = "[red]❌ DOWN[/red]"
            any_down = True

        latency = f"{r.latency_ms:.0f}ms" if r.latency_ms > 0 else "—"
        table.add_row(r.source_id, status, latency, r.message)

    channels = Table(
        title="Channels",
        show_lines=True,
        title_style="bold cyan",
    )
    channels.add_column("Channel", style="bold")
    channels.add_column("Enabled", justify="center")
    channels.add_column("Configured", justify="center")
    channels.add_column("Missing", style="dim")
    for c in await asyncio.to_thread(checker.check_channels):
        channels.add_row(
            c.channel,
            "yes" if c.channel in Settings.ENABLED_CHANNELS else "no",
            "[green]yes[/green]" if c.configured else "[red]no[/red]",
            ", ".join(c.missing),
        )

    console = Console()
    console.print(table)
    console.print(channels)
    return 1 if any_down else 0
