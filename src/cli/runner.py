# src/cli/runner.py

"""Headless CLI: search or list deals, then print products or messages."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from src.config.settings import Settings
from src.gateways.search_gateway import GatewayConfig
from src.models.product import Product
from src.models.search_filters import SearchFilters
from src.services.search_service import SearchResult, SearchService
from src.services.share_service import build_share_payload
from src.sharing.message_composer import format_price

logger = logging.getLogger("ml_afiliados.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _products_to_dicts(
    products: list[Product],
    affiliate_tag: str | None,
    phone: str | None,
) -> list[dict[str, object]]:
    """Serialise products (plus share links) to plain dicts."""
    rows: list[dict[str, object]] = []
    for p in products:
        share = build_share_payload(p, affiliate_tag, phone)
        rows.append(
            {
                "id": p.id,
                "title": p.title,
                "price": p.price,
                "originalPrice": p.original_price,
                "currency": p.currency,
                "image": p.image,
                "permalink": p.permalink,
                "condition": p.condition,
                "availableQuantity": p.available_quantity,
                "soldQuantity": p.sold_quantity,
                "shipping": {"freeShipping": p.shipping.free_shipping},
                "discount": p.discount,
                "affiliateLink": share.affiliate_link,
                "whatsappUrl": share.whatsapp_url,
            }
        )
    return rows


def _print_table(products: list[Product]) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title="Mercado Livre",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", max_width=60)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Off", justify="right", style="bold green")
    table.add_column("Ship", justify="center")
    table.add_column("Sold", justify="right")
    table.add_column("Permalink", overflow="fold", style="dim")

    for idx, p in enumerate(products, 1):
        table.add_row(
            str(idx),
            p.title[:60],
            format_price(p.price, p.currency),
            f"-{p.discount}%" if p.discount > 0 else "",
            "🚚" if p.shipping.free_shipping else "",
            str(p.sold_quantity) if p.sold_quantity else "",
            p.permalink,
        )

    Console().print(table)


def _print_messages(
    products: list[Product],
    affiliate_tag: str | None,
    phone: str | None,
) -> None:
    """Print each share message followed by its WhatsApp link."""
    for p in products:
        share = build_share_payload(p, affiliate_tag, phone)
        sys.stdout.write(share.message + "\n")
        sys.stdout.write(f"➡️  {share.whatsapp_url}\n\n")


def report_result(
    result: SearchResult,
    output_format: str,
    affiliate_tag: str | None = None,
    phone: str | None = None,
) -> int:
    """Print a SearchResult and return an exit code (0=ok, 1=fail)."""
    if result.error is not None:
        _err.print(f"[red]Error ({result.error.kind}): {result.user_message}[/red]")
        _err.print(f"[dim]{result.error.message}[/dim]")
        return 1

    if not result.products:
        _err.print("[yellow]No products found.[/yellow]")
        return 1

    _err.print(
        f"[green]✓ {len(result.products)} products"
        f" of {result.total_available} available[/green]"
    )
    if not affiliate_tag:
        _err.print(
            "[yellow]No ML_AFFILIATE_TAG configured: "
            "links are not tagged.[/yellow]"
        )

    if output_format == "table":
        _print_table(result.products)
    elif output_format == "messages":
        _print_messages(result.products, affiliate_tag, phone)
    else:
        json.dump(
            _products_to_dicts(result.products, affiliate_tag, phone),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    return 0


async def cli_search(
    query: str | None,
    filters: SearchFilters,
    output_format: str = "json",
    mode: str | None = None,
    phone: str | None = None,
    deals: bool = False,
) -> int:
    """Run a headless search (or deals listing) and return an exit code."""
    try:
        service = SearchService(config=GatewayConfig.from_settings(mode))
    except ValueError as exc:
        _err.print(f"[red]{exc}[/red]")
        return 1

    tag = Settings.AFFILIATE_TAG or None
    if deals:
        _err.print(
            "[bold]Fetching deals[/bold]"
            + (f"  [dim]category={filters.category}[/dim]" if filters.category else "")
        )
        result = await service.get_deals(filters.category, filters.limit)
    else:
        _err.print(
            f"[bold]Searching:[/bold] {query}  "
            f"[dim]mode={service.gateway.mode}[/dim]"
        )
        result = await service.search(query or "", filters)

    return report_result(result, output_format, tag, phone)
