# src/ui/app.py

"""Terminal UI for trendbuy: paste a link or type keywords, get deals."""

import logging
import webbrowser
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Static,
)

from src.models.product import Product
from src.services.search_orchestrator import (
    SearchOrchestrator,
    SearchOutcome,
    SearchState,
)

logger = logging.getLogger("trendbuy.ui")

RECENT_IN_UI = 3

_STATUS_TEXT: dict[SearchState, str] = {
    SearchState.CACHE_CHECK: "🔍 Checking recent searches...",
    SearchState.INTERPRETING: "🔗 Verifying link...",
    SearchState.MATCHING: "🛍  Finding products...",
    SearchState.CACHE_WRITE: "💾 Saving results...",
}


class TrendBuyApp(App[object]):
    """Find products from your social posts."""

    CSS_PATH = "styles.css"
    TITLE = "TrendBuy"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("p", "sort_price", "Price Sort"),
        Binding("r", "sort_rating", "Rating Sort"),
        Binding("d", "sort_discount", "Deal Sort"),
        Binding("x", "clear_cache", "Clear Cache"),
    ]

    def __init__(
        self, orchestrator: SearchOrchestrator | None = None
    ) -> None:
        super().__init__()
        self.products: list[Product] = []
        self.orchestrator = (
            orchestrator
            if orchestrator is not None
            else SearchOrchestrator(notifier=self)
        )
        self.orchestrator.add_listener(self._on_search_state)
        self.last_outcome: SearchOutcome | None = None

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield Container(
            Static(
                "✨ TrendBuy: find products from your social posts",
                id="title",
            ),
            Input(
                placeholder="Paste TikTok, Instagram, or YouTube link...",
                id="url_input",
            ),
            Horizontal(
                Input(
                    placeholder="Or describe the product (e.g. wireless earbuds)",
                    id="keywords_input",
                ),
                Button("Find Products", variant="primary", id="search_btn"),
                id="search_bar",
            ),
            Static("Ready", id="status"),
            Static("", id="recent"),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="results_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Configure the results table and show recent searches."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )
        table.add_columns(
            "Title", "Price", "Deal", "Save", "Rating", "Store"
        )
        self.refresh_recent()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button click events."""
        if event.button.id == "search_btn":
            self.start_search()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle Enter in either input."""
        if event.input.id in ("url_input", "keywords_input"):
            self.start_search()

    def start_search(self) -> None:
        """Run a search in a worker; a newer search cancels an older one."""
        url_text = self.query_one("#url_input", Input).value
        keywords_text = self.query_one("#keywords_input", Input).value
        self.run_worker(
            self.perform_search(url_text, keywords_text),
            group="search",
            exclusive=True,
        )

    async def perform_search(
        self, url_text: str, keywords_text: str
    ) -> SearchOutcome | None:
        """Search and render the outcome."""
        outcome = await self.orchestrator.search_input(
            url_text, keywords_text
        )
        if outcome is None:
            return None

        self.last_outcome = outcome
        status = self.query_one("#status", Static)
        result = outcome.result

        if outcome.state is SearchState.FAILED or result is None:
            self.products = []
            status.update("❌ Search failed")
        elif not result.products:
            self.products = []
            status.update("❌ No products found")
        else:
            self.products = list(result.products)
            note = " (from cache)" if outcome.from_cache else ""
            confirm = (
                " (low confidence, please confirm)"
                if outcome.needs_confirmation
                else ""
            )
            status.update(
                f"✅ Found {len(self.products)} products{note}{confirm}"
            )

        self.populate_table()
        self.refresh_recent()
        return outcome

    def _on_search_state(self, state: SearchState) -> None:
        """Mirror orchestrator progress into the status line and button."""
        text = _STATUS_TEXT.get(state)
        if text:
            self.query_one("#status", Static).update(text)
        self.query_one("#search_btn", Button).disabled = (
            self.orchestrator.is_loading
        )

    def refresh_recent(self) -> None:
        """Show the last few successful searches under the inputs."""
        entries = self.orchestrator.recent_searches(RECENT_IN_UI)
        recent = self.query_one("#recent", Static)
        if not entries:
            recent.update("")
            return
        labels = [
            e.url or ", ".join(e.keywords) for e in entries
        ]
        recent.update("🕒 Recent: " + " | ".join(labels))

    def populate_table(self) -> None:
        """Fill the DataTable with current product results."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )
        table.clear()
        if not self.products:
            return

        min_price = min(p.price for p in self.products)

        for p in self.products:
            price_style = "bold green" if p.price == min_price else ""
            deal = (
                Text(f"{p.discount_percentage}% OFF", style="bold red")
                if p.has_markdown
                else Text("")
            )
            save = (
                Text(f"Save ${p.savings:.2f}", style="green")
                if p.savings > 0
                else Text("")
            )
            table.add_row(
                p.title[:60],
                Text(f"${p.price:.2f}", style=price_style),
                deal,
                save,
                f"⭐ {p.rating:.1f} ({p.review_count:,})",
                p.store.value,
            )

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Open the selected product's affiliate link in a browser."""
        if 0 <= event.cursor_row < len(self.products):
            product = self.products[event.cursor_row]
            self.notify(
                f"Taking you to {product.store.value} to complete your purchase",
                title="Redirecting...",
            )
            logger.info("Opening affiliate link %s", product.affiliate_url)
            webbrowser.open(product.affiliate_url, new=2)

    def action_sort_price(self) -> None:
        """Sort products by price, ascending."""
        self.products.sort(key=lambda p: p.price)
        self.populate_table()

    def action_sort_rating(self) -> None:
        """Sort products by rating, descending."""
        self.products.sort(key=lambda p: p.rating, reverse=True)
        self.populate_table()

    def action_sort_discount(self) -> None:
        """Sort products by percent off, biggest deal first."""
        self.products.sort(
            key=lambda p: p.discount_percentage or 0, reverse=True
        )
        self.populate_table()

    def action_clear_cache(self) -> None:
        """Forget every cached search."""
        removed = self.orchestrator.clear_cache()
        self.refresh_recent()
        self.notify(f"Removed {removed} cached searches", title="Cache Cleared")
