# src/cli/runner.py

"""Headless CLI runner: one feed search, JSON or table output."""

import json
import logging
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from src.config.settings import Settings
from src.feed.errors import FeedError
from src.models.filter_spec import FilterSpec
from src.models.product import Product
from src.services.feed_pipeline import FeedPipeline, default_pipeline
from src.storage.file_manager import FileManager

logger = logging.getLogger("feed_search.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _write_json(payload: dict[str, Any]) -> None:
    json.dump(payload, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def _print_table(products: list[Product]) -> None:
    """Render a Rich table of products in ranked order."""
    table = Table(
        title="Feed Results",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", max_width=60)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Rating", justify="center")
    table.add_column("Sold", justify="right")
    table.add_column("Category", style="magenta")
    table.add_column("URL", overflow="fold", style="dim")

    for idx, p in enumerate(products, 1):
        table.add_row(
            str(idx),
            p.title[:60],
            f"{p.currency} {p.price:,.2f}",
            f"{p.rating:.1f}" if p.rating else "—",
            f"{p.sold:,.0f}",
            p.category or "—",
            p.url,
        )

    Console().print(table)


def _save_results(
    file_manager: FileManager,
    query: str,
    products: list[Product],
) -> None:
    """Write JSON and CSV copies of the results."""
    try:
        path = file_manager.save_results(query, products)
        _err.print(f"[dim]Saved → {path}[/dim]")
        csv_path = file_manager.export_csv(query, products)
        _err.print(f"[dim]Exported → {csv_path}[/dim]")
    except OSError as exc:
        logger.error("Save failed: %s", exc, exc_info=True)
        _err.print(f"[red]Save failed: {exc}[/red]")


def cli_search(
    query: str | None,
    category: str | None = None,
    max_price: float | None = None,
    min_rating: float | None = None,
    limit: int = Settings.DEFAULT_LIMIT,
    debug: bool = False,
    output_format: str = "json",
    output_dir: str | None = None,
    save: bool = False,
    pipeline: FeedPipeline | None = None,
) -> int:
    """Run a single feed search and return an exit code (0=ok, 1=fail)."""
    filters = FilterSpec.build(
        query=query,
        category=category,
        max_price=max_price,
        min_rating=min_rating,
    )
    pipeline = pipeline or default_pipeline()

    _err.print(
        f"[bold]Searching feed:[/bold] {filters.query or '(any)'}  "
        f"[dim]limit={limit}[/dim]"
    )

    try:
        result = pipeline.search(filters, limit)
    except FeedError as exc:
        _err.print(f"[red]Error: {exc.detail}[/red]")
        _write_json(exc.to_payload())
        return 1

    if debug:
        _write_json(result.debug_payload())
        return 0

    if not result.products:
        _err.print("[yellow]No products found.[/yellow]")
    else:
        incomplete = (
            " (partial scan)" if result.outcome.possibly_incomplete else ""
        )
        _err.print(
            f"[green]✓ {result.returned_count} products from "
            f"{result.outcome.rows_seen:,} rows{incomplete}[/green]"
        )

    if save:
        results_dir = Path(output_dir) if output_dir else None
        _save_results(FileManager(results_dir), filters.query, result.products)

    if output_format == "table":
        _print_table(result.products)
    else:
        _write_json(result.to_payload())

    return 0


def run_health_check(url: str | None = None) -> int:
    """Probe the feed source and print a one-row status table."""
    from src.services.health_checker import probe_feed

    _err.print("[bold]Running feed health check...[/bold]")
    result = probe_feed(Settings.FEED_URL if url is None else url)

    table = Table(
        title="Feed Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Feed", style="bold", overflow="fold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Content-Type", style="dim")
    table.add_column("Notes", style="dim")

    if result.status == "ok":
        status = "[green]✅ OK[/green]"
    elif result.status == "slow":
        status = "[yellow]⚠️  SLOW[/yellow]"
    else:
        status = "[red]❌ DOWN[/red]"

    latency = (
        f"{result.latency_ms:.0f}ms" if result.latency_ms > 0 else "—"
    )
    table.add_row(
        result.url or "—",
        status,
        latency,
        result.content_type or "—",
        result.message,
    )

    Console().print(table)
    return 1 if result.status == "down" else 0
