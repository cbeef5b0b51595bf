# src/cli/runner.py

"""Headless CLI: search, recent searches, cache stats, cache clear."""

import json
import logging
import sys
from datetime import datetime

from rich.console import Console
from rich.table import Table

from src.models.product import Product
from src.models.search_request import InvalidSearchRequest, SearchRequest
from src.services.notifications import Severity
from src.services.search_orchestrator import (
    SearchOrchestrator,
    SearchState,
)

logger = logging.getLogger("trendbuy.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)

_SEVERITY_STYLES: dict[str, str] = {
    "information": "cyan",
    "warning": "yellow",
    "error": "red",
}


class ConsoleNotifier:
    """Print pipeline notifications to stderr."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or _err

    def notify(
        self,
        message: str,
        *,
        title: str = "",
        severity: Severity = "information",
    ) -> None:
        style = _SEVERITY_STYLES.get(severity, "white")
        prefix = f"[bold]{title}[/bold] " if title else ""
        self.console.print(f"[{style}]{prefix}{message}[/{style}]")


def _resolve(orchestrator: SearchOrchestrator | None) -> SearchOrchestrator:
    if orchestrator is not None:
        return orchestrator
    return SearchOrchestrator(notifier=ConsoleNotifier())


def _products_to_dicts(products: list[Product]) -> list[dict[str, object]]:
    """Serialise a product list to plain dicts for JSON output."""
    return [
        {
            **p.to_dict(),
            "discountPercentage": p.discount_percentage,
            "savings": round(p.savings, 2),
        }
        for p in products
    ]


def _print_table(products: list[Product]) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title="Search Results",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", max_width=60)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Deal", justify="right", style="red")
    table.add_column("Save", justify="right", style="green")
    table.add_column("Rating", justify="center")
    table.add_column("Store", style="magenta")
    table.add_column("Link", overflow="fold", style="dim")

    for idx, p in enumerate(products, 1):
        deal = (
            f"{p.discount_percentage}% OFF" if p.has_markdown else "—"
        )
        table.add_row(
            str(idx),
            p.title[:60],
            f"${p.price:,.2f}",
            deal,
            f"${p.savings:,.2f}" if p.savings > 0 else "",
            f"{p.rating:.1f} ({p.review_count:,})",
            p.store.value,
            p.affiliate_url,
        )

    Console().print(table)


async def cli_search(
    url: str | None,
    keywords: str | None,
    output_format: str,
    orchestrator: SearchOrchestrator | None = None,
) -> int:
    """Run a headless search and return an exit code.

    0 = products found, 1 = no products or search failed,
    2 = neither a link nor keywords given.
    """
    try:
        request = SearchRequest.from_input(url or "", keywords or "")
    except InvalidSearchRequest as exc:
        logger.warning("Rejected CLI search: %s", exc)
        _err.print(f"[red]{exc}[/red]")
        return 2

    orch = _resolve(orchestrator)

    target = request.url or ", ".join(request.keywords)
    _err.print(f"[bold]Searching:[/bold] {target}")

    outcome = await orch.search(request)
    logger.info("CLI search finished in state %s", outcome.state.value)

    if outcome.state is SearchState.FAILED or outcome.result is None:
        return 1

    if outcome.metadata is not None:
        _err.print(
            f"[dim]platform={outcome.metadata.platform.value} "
            f"keywords={', '.join(outcome.metadata.keywords) or '—'} "
            f"link confidence={outcome.metadata.confidence:.2f}[/dim]"
        )

    result = outcome.result
    if not result.products:
        return 1

    _err.print(
        f"[green]✓ {len(result.products)} products "
        f"(source={result.source.value}, "
        f"confidence={result.confidence:.2f})[/green]"
    )

    if output_format == "table":
        _print_table(result.products)
    else:
        json.dump(
            _products_to_dicts(result.products),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")

    return 0


def _format_ms(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime(
        "%Y-%m-%d %H:%M"
    )


def run_recent(
    limit: int, orchestrator: SearchOrchestrator | None = None
) -> int:
    """Print the most recent cached searches that found products."""
    orch = _resolve(orchestrator)
    entries = orch.recent_searches(limit)
    if not entries:
        _err.print("[yellow]No recent searches.[/yellow]")
        return 0

    table = Table(
        title="Recent Searches",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("When", style="dim")
    table.add_column("Search")
    table.add_column("Products", justify="right")
    table.add_column("Top Match", max_width=50)

    for entry in entries:
        table.add_row(
            _format_ms(entry.timestamp),
            entry.url or ", ".join(entry.keywords),
            str(len(entry.data.products)),
            entry.data.products[0].title[:50],
        )

    Console().print(table)
    return 0


def run_stats(orchestrator: SearchOrchestrator | None = None) -> int:
    """Print cache statistics."""
    orch = _resolve(orchestrator)
    stats = orch.cache_stats()
    oldest = (
        stats.oldest_timestamp.strftime("%Y-%m-%d %H:%M")
        if stats.oldest_timestamp
        else "—"
    )
    _err.print(
        f"[bold]Cache:[/bold] {stats.count} entries, "
        f"{stats.size_label}, oldest {oldest}"
    )
    return 0


def run_clear_cache(orchestrator: SearchOrchestrator | None = None) -> int:
    """Drop every cached search."""
    orch = _resolve(orchestrator)
    removed = orch.clear_cache()
    _err.print(f"[green]✓ Cleared {removed} cached searches[/green]")
    return 0
