# src/catalog_state/ui/app.py

"""Terminal catalog browser built on the catalog state engine."""

import asyncio
import logging
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.timer import Timer
from textual.widgets import DataTable, Footer, Header, Input, Static

from catalog_state.config.settings import Settings
from catalog_state.errors import InvalidCommandError
from catalog_state.models.criteria import (
    SortKey,
    price_label,
    price_preset_changes,
)
from catalog_state.models.item import Item
from catalog_state.models.load_state import Collection, LoadState, LoadStatus
from catalog_state.services.catalog_engine import CatalogEngine
from catalog_state.services.view_projector import (
    ContentState,
    PresentationMode,
    ViewProjector,
)
from catalog_state.sources.base_source import CatalogSource

logger = logging.getLogger("catalog_state.ui")


class CatalogBrowserApp(App[object]):
    """Terminal UI for browsing, filtering and carting catalog items."""

    CSS = """
    #search_bar { height: 3; }
    #search_input { width: 1fr; }
    #recommendations { height: auto; color: $text-muted; }
    #status { height: 1; }
    #filter_status { height: 1; color: $text-muted; }
    #cart_status { height: 1; text-align: right; }
    """

    AUTO_FOCUS = "#results_table"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("n", "next_page", "Next"),
        Binding("b", "prev_page", "Back"),
        Binding("p", "sort_price", "Price Sort"),
        Binding("r", "sort_rating", "Rating Sort"),
        Binding("s", "sort_sales", "Sales Sort"),
        Binding("t", "sort_newest", "Newest"),
        Binding("c", "cycle_category", "Category"),
        Binding("m", "cycle_price", "Price Range"),
        Binding("i", "toggle_stock", "In Stock"),
        Binding("x", "reset_filters", "Reset"),
        Binding("a", "add_to_cart", "Add to Cart"),
        Binding("1", "clear_filter('search_term')", "Clear Search", show=False),
        Binding("2", "clear_filter('category')", "Clear Category", show=False),
        Binding("3", "clear_filter('price')", "Clear Price", show=False),
        Binding("4", "clear_filter('in_stock_only')", "Clear Stock", show=False),
    ]

    def __init__(
        self,
        source: CatalogSource,
        engine: CatalogEngine | None = None,
    ) -> None:
        super().__init__()
        self.source = source
        self.engine = engine or CatalogEngine()
        self.engine.loader.add_listener(self._on_load_transition)
        self.shown_items: tuple[Item, ...] = ()
        self._search_timer: Timer | None = None
        self.load_tasks: list[asyncio.Task[LoadState]] = []

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield Container(
            Static("Recommended: loading...", id="recommendations"),
            Horizontal(
                Input(
                    placeholder="Search name or description...",
                    id="search_input",
                ),
                id="search_bar",
            ),
            Static("Filters", id="filter_status"),
            Static("Ready", id="status"),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="results_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            Static("Cart: 0 items", id="cart_status"),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Configure columns and kick off both loads."""
        table = self._table()
        table.add_columns("ID", "Name", "Price", "Category", "Rating", "Sales", "Stock")
        self.load_tasks = [
            self.engine.loader.run(Collection.CATALOG, self.source.fetch_items),
            self.engine.loader.run(
                Collection.RECOMMENDATIONS, self.source.fetch_recommendations
            ),
        ]
        self.refresh_view()

    # ── Load lifecycle ───────────────────────────────────

    def _on_load_transition(
        self, collection: Collection, state: LoadState
    ) -> None:
        if not self.is_running:
            return
        if state.status is LoadStatus.REJECTED:
            self.notify(f"Error: {state.error}", severity="error")
        if collection is Collection.RECOMMENDATIONS:
            self._refresh_recommendations(state)
        else:
            self.refresh_view()

    def _refresh_recommendations(self, state: LoadState) -> None:
        widget = self.query_one("#recommendations", Static)
        recs = self.engine.store.recommendations
        if state.is_pending and not recs:
            widget.update("Recommended: loading...")
            return
        if not recs:
            widget.update("Recommended: none")
            return
        first_slide = ViewProjector.carousel_slides(recs)[0]
        names = " | ".join(item.name for item in first_slide)
        widget.update(f"Recommended: {names}")

    # ── Rendering ────────────────────────────────────────

    def _table(self) -> DataTable[str | Text]:
        return cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )

    def refresh_view(self) -> None:
        """Redraw table and status from the engine's current state."""
        table = self._table()
        status = self.query_one("#status", Static)
        table.clear()
        self._update_filter_status()

        snap = self.engine.snapshot()
        content = self.engine.content_state()
        mode = self.engine.presentation_mode()

        if content is ContentState.PLACEHOLDER:
            self.shown_items = ()
            for _ in range(Settings.PLACEHOLDER_CARD_COUNT):
                table.add_row("…", Text("loading", style="dim"), "", "", "", "", "")
            status.update("⏳ Loading catalog...")
            return
        if content is ContentState.FAILED:
            self.shown_items = ()
            error = snap.load_states[Collection.CATALOG].error
            status.update(f"❌ Could not load catalog: {error}")
            return

        # Virtualized mode hands the whole view to the table, which only
        # renders the visible rows; paged mode shows one page slice.
        if mode is PresentationMode.VIRTUALIZED:
            self.shown_items = snap.view.items
        else:
            self.shown_items = self.engine.current_page()

        for item in self.shown_items:
            price = Text(f"{item.price:,.2f}", style="bold green")
            if item.is_marked_down:
                price.append(f" {item.original_price:,.2f}", style="dim strike")
            table.add_row(
                str(item.id),
                item.name[:40],
                price,
                item.category,
                f"⭐ {item.rating:.1f}",
                f"{item.sales:,}",
                "yes" if item.in_stock else Text("out", style="red"),
            )

        if content is ContentState.EMPTY:
            status.update("❌ No items match the current filters")
        elif mode is PresentationMode.VIRTUALIZED:
            status.update(f"✅ {snap.total_items} items (scroll)")
        else:
            status.update(
                f"✅ {snap.total_items} items, page "
                f"{snap.cursor.page}/{max(self.engine.page_count(), 1)}"
            )

    def _update_filter_status(self) -> None:
        criteria = self.engine.store.criteria
        count = criteria.active_filter_count
        parts = [
            f"Category: {criteria.category or 'all'}",
            f"Price: {price_label(criteria)}",
        ]
        if criteria.in_stock_only:
            parts.append("In stock only")
        badge = f"Filters ({count})" if count else "Filters"
        self.query_one("#filter_status", Static).update(
            f"{badge} | " + " | ".join(parts)
        )

    def _update_cart_status(self) -> None:
        self.query_one("#cart_status", Static).update(
            f"Cart: {self.engine.cart.total_quantity} items"
        )

    # ── Search (debounced) ───────────────────────────────

    def on_input_changed(self, event: Input.Changed) -> None:
        """Apply the search term once typing has paused."""
        if event.input.id != "search_input":
            return
        if self._search_timer is not None:
            self._search_timer.stop()
        self._search_timer = self.set_timer(
            Settings.SEARCH_DEBOUNCE_SECONDS, self.apply_search
        )

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter applies the search immediately."""
        if event.input.id == "search_input":
            if self._search_timer is not None:
                self._search_timer.stop()
            self.apply_search()

    def apply_search(self) -> None:
        term = self.query_one("#search_input", Input).value
        self._command(search_term=term or None)

    def _command(self, **changes: object) -> None:
        try:
            self.engine.update_criteria(**changes)
        except InvalidCommandError as exc:
            logger.warning("Rejected criteria change: %s", exc)
            self.notify(str(exc), severity="error")
            return
        self.refresh_view()

    # ── Actions ──────────────────────────────────────────

    def action_next_page(self) -> None:
        if self.engine.store.cursor.page < self.engine.page_count():
            self.engine.set_pagination(page=self.engine.store.cursor.page + 1)
            self.refresh_view()

    def action_prev_page(self) -> None:
        if self.engine.store.cursor.page > 1:
            self.engine.set_pagination(page=self.engine.store.cursor.page - 1)
            self.refresh_view()

    def action_sort_price(self) -> None:
        """Price ascending; pressing again flips to descending."""
        current = self.engine.store.criteria.sort_key
        key = (
            SortKey.PRICE_DESC
            if current is SortKey.PRICE_ASC
            else SortKey.PRICE_ASC
        )
        self._command(sort_key=key)

    def action_sort_rating(self) -> None:
        self._command(sort_key=SortKey.RATING_DESC)

    def action_sort_sales(self) -> None:
        self._command(sort_key=SortKey.SALES_DESC)

    def action_sort_newest(self) -> None:
        self._command(sort_key=SortKey.NEWEST)

    def action_cycle_category(self) -> None:
        """All categories, then each one in turn, then back to all."""
        options: list[str | None] = [None, *Settings.CATEGORIES]
        current = self.engine.store.criteria.category
        self._command(
            category=options[(options.index(current) + 1) % len(options)]
        )

    def action_cycle_price(self) -> None:
        """Step through the price presets; "any" clears the range."""
        labels = [label for label, _low, _high in Settings.PRICE_PRESETS]
        current = price_label(self.engine.store.criteria)
        following = (
            labels[(labels.index(current) + 1) % len(labels)]
            if current in labels
            else labels[0]
        )
        self._command(**price_preset_changes(following))

    def action_clear_filter(self, name: str) -> None:
        """Clear one filter, leaving the others in place."""
        if name == "price":
            self._command(min_price=None, max_price=None)
            return
        if name == "search_term":
            self.query_one("#search_input", Input).value = ""
            if self._search_timer is not None:
                self._search_timer.stop()
        self._command(**{name: None})

    def action_toggle_stock(self) -> None:
        self._command(in_stock_only=not self.engine.store.criteria.in_stock_only)

    def action_reset_filters(self) -> None:
        self.query_one("#search_input", Input).value = ""
        if self._search_timer is not None:
            self._search_timer.stop()
        self.engine.reset_criteria()
        self.refresh_view()

    def action_add_to_cart(self) -> None:
        """Add one of the highlighted item to the cart."""
        row = self._table().cursor_row
        if not 0 <= row < len(self.shown_items):
            return
        item = self.shown_items[row]
        if not item.in_stock:
            self.notify("Item is out of stock", severity="warning")
            return
        self.engine.add_to_cart(item.id, 1)
        self._update_cart_status()
        self.notify(f"Added {item.name} to cart")
