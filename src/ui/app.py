# src/ui/app.py

"""Terminal UI: search, filter, preview and share Mercado Livre products."""

import logging
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Button,
    Checkbox,
    DataTable,
    Footer,
    Header,
    Input,
    Select,
    Static,
)

from src.config.settings import Settings
from src.gateways.search_gateway import GatewayConfig
from src.models.product import Product
from src.models.search_filters import SearchFilters, SortOrder
from src.services.search_service import SearchResult, SearchService
from src.services.share_service import SharePayload, build_share_payload
from src.sharing.message_composer import format_price
from src.sharing.share_dispatcher import copy_to_clipboard, open_share_url

logger = logging.getLogger("ml_afiliados.ui")

_ANY_CONDITION = "any"

SORT_OPTIONS: list[tuple[str, str]] = [
    ("Relevance", SortOrder.RELEVANCE.value),
    ("Lowest price", SortOrder.PRICE_ASC.value),
    ("Highest price", SortOrder.PRICE_DESC.value),
]
CONDITION_OPTIONS: list[tuple[str, str]] = [
    ("Any condition", _ANY_CONDITION),
    ("New", "new"),
    ("Used", "used"),
]


class AffiliateSearchApp(App[object]):
    """Search the marketplace and share affiliate links to WhatsApp."""

    CSS_PATH = "styles.css"
    TITLE = "ML Afiliados"

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("f2", "copy_message", "Copy message"),
        Binding("f3", "share_whatsapp", "WhatsApp"),
        Binding("f4", "open_product", "Open product"),
        Binding("f5", "load_deals", "Deals"),
    ]

    def __init__(
        self,
        service: SearchService | None = None,
        mode: str | None = None,
        affiliate_tag: str | None = None,
    ) -> None:
        super().__init__()
        self.service = service or SearchService(
            config=GatewayConfig.from_settings(mode)
        )
        self.affiliate_tag = (
            affiliate_tag
            if affiliate_tag is not None
            else Settings.AFFILIATE_TAG
        )
        self.products: list[Product] = []
        self.current_query: str = ""

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield Container(
            Static("🛍️ Mercado Livre Afiliados", id="title"),
            Horizontal(
                Input(placeholder="Search products...", id="search_input"),
                Button("Search", variant="primary", id="search_btn"),
                id="search_bar",
            ),
            Horizontal(
                Select(
                    SORT_OPTIONS,
                    value=SortOrder.RELEVANCE.value,
                    allow_blank=False,
                    id="sort_select",
                ),
                Select(
                    CONDITION_OPTIONS,
                    value=_ANY_CONDITION,
                    allow_blank=False,
                    id="condition_select",
                ),
                Checkbox("🚚 Free shipping", id="free_shipping"),
                Checkbox("🏷️ On sale", id="discount"),
                id="filter_bar",
            ),
            Static(
                "⚠️ Set ML_AFFILIATE_TAG in .env to tag your links."
                if not self.affiliate_tag
                else "",
                id="tag_warning",
            ),
            Static("Type a product name to start", id="status"),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="results_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            Horizontal(
                Input(
                    placeholder="Phone / group number (optional), e.g. 5511999999999",
                    id="phone_input",
                ),
                id="share_bar",
            ),
            Static("", id="message_preview"),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Configure the results table columns on startup."""
        self._table().add_columns(
            "Title", "Price", "Off", "Shipping", "Sold"
        )

    # ── Helpers ──────────────────────────────────────────

    def _table(self) -> DataTable[str | Text]:
        return cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )

    def current_filters(self) -> SearchFilters:
        """Read the filter widgets into a SearchFilters."""
        sort = self.query_one("#sort_select", Select).value
        condition = self.query_one("#condition_select", Select).value
        return SearchFilters(
            sort=SortOrder(str(sort)),
            free_shipping=self.query_one("#free_shipping", Checkbox).value,
            condition=(
                None if condition == _ANY_CONDITION else str(condition)
            ),
            discount=self.query_one("#discount", Checkbox).value,
        )

    def selected_product(self) -> Product | None:
        row = self._table().cursor_row
        if 0 <= row < len(self.products):
            return self.products[row]
        return None

    def share_payload(self, product: Product) -> SharePayload:
        phone = self.query_one("#phone_input", Input).value.strip()
        return build_share_payload(
            product, self.affiliate_tag or None, phone or None
        )

    # ── Events ───────────────────────────────────────────

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button click events."""
        if event.button.id == "search_btn":
            await self.perform_search()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle Enter key in the search input."""
        if event.input.id == "search_input":
            await self.perform_search()

    async def on_select_changed(self, event: Select.Changed) -> None:
        """Re-run the current search when a filter select changes."""
        if self.current_query:
            await self.perform_search()

    async def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        """Re-run the current search when a filter checkbox changes."""
        if self.current_query:
            await self.perform_search()

    def on_data_table_row_highlighted(
        self, event: DataTable.RowHighlighted
    ) -> None:
        """Show the share message for the highlighted product."""
        preview = self.query_one("#message_preview", Static)
        if 0 <= event.cursor_row < len(self.products):
            product = self.products[event.cursor_row]
            preview.update(Text(self.share_payload(product).message))
        else:
            preview.update("")

    # ── Searching ────────────────────────────────────────

    async def perform_search(self) -> None:
        """Search the marketplace with the current query and filters."""
        query = self.query_one("#search_input", Input).value.strip()
        if not query:
            self.notify("Please enter a search term", severity="warning")
            return

        self.current_query = query
        status = self.query_one("#status", Static)
        status.update(f"🔍 Searching '{query}'...")
        result = await self.service.search(query, self.current_filters())
        self.show_result(result)

    async def action_load_deals(self) -> None:
        """List current deals, cheapest first."""
        self.current_query = ""
        self.query_one("#status", Static).update("🏷️ Loading deals...")
        self.show_result(await self.service.get_deals())

    def show_result(self, result: SearchResult) -> None:
        """Render a SearchResult or its error."""
        status = self.query_one("#status", Static)
        if result.error is not None:
            self.products = []
            self.populate_table()
            status.update(f"❌ {result.user_message}")
            self.notify(result.user_message, severity="error")
            return

        self.products = result.products
        self.populate_table()
        if not self.products:
            status.update("❌ No products found")
        else:
            status.update(f"✅ Found {len(self.products)} products")

    def populate_table(self) -> None:
        """Fill the DataTable with current product results."""
        table = self._table()
        table.clear()
        self.query_one("#message_preview", Static).update("")
        for p in self.products:
            table.add_row(
                p.title[:60],
                Text(
                    format_price(p.price, p.currency),
                    style="bold green" if p.discount > 0 else "",
                ),
                f"-{p.discount}%" if p.discount > 0 else "",
                "Free" if p.shipping.free_shipping else "",
                str(p.sold_quantity) if p.sold_quantity else "",
            )

    # ── Sharing ──────────────────────────────────────────

    def action_copy_message(self) -> None:
        """Copy image URL + message of the selected product."""
        product = self.selected_product()
        if product is None:
            self.notify("No product selected", severity="warning")
            return
        text = self.share_payload(product).clipboard_text
        if copy_to_clipboard(text, fallback=self.copy_to_clipboard):
            self.notify("Message copied!")
        else:
            self.notify("Could not copy to clipboard", severity="error")

    def action_share_whatsapp(self) -> None:
        """Open the WhatsApp share link for the selected product."""
        product = self.selected_product()
        if product is None:
            self.notify("No product selected", severity="warning")
            return
        url = self.share_payload(product).whatsapp_url
        if not open_share_url(url):
            self.notify(url, title="Open this link", timeout=15)

    def action_open_product(self) -> None:
        """Open the affiliate product page in the browser."""
        product = self.selected_product()
        if product is not None:
            open_share_url(self.share_payload(product).affiliate_link)
