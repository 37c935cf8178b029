# src/sharing/message_composer.py

"""WhatsApp message template for a product."""

from decimal import ROUND_HALF_UP, Decimal

from src.models.product import Product

# pt-BR currency symbols for the codes the marketplace returns
_CURRENCY_SYMBOLS: dict[str, str] = {
    "BRL": "R$",
    "USD": "US$",
    "EUR": "€",
    "ARS": "ARS",
}

# en-US grouping → pt-BR grouping
_PT_BR_SEPARATORS = str.maketrans({",": ".", ".": ","})


def format_price(value: float, currency: str = "BRL") -> str:
    """Render a price the pt-BR way, e.g. ``1234.5`` → ``R$ 1.234,50``."""
    symbol = _CURRENCY_SYMBOLS.get(currency.upper(), currency.upper())
    cents = Decimal(repr(abs(value))).quantize(
        Decimal("0.01"), rounding=ROUND_HALF_UP
    )
    amount = f"{cents:,.2f}".translate(_PT_BR_SEPARATORS)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol} {amount}"


def generate_whatsapp_message(product: Product, affiliate_link: str) -> str:
    """Fixed share template; identical inputs give identical output."""
    shipping_line = (
        "🚚 *Frete GRÁTIS*\n\n" if product.shipping.free_shipping else ""
    )
    return (
        f"🛍️ *{product.title}*\n"
        "\n"
        f"💰 *Preço:* {format_price(product.price, product.currency)}\n"
        "\n"
        f"{shipping_line}🔗 *Link:* {affiliate_link}\n"
        "\n"
        "✨ Aproveite essa oferta!"
    )


def compose_clipboard_text(product: Product, message: str) -> str:
    """Clipboard payload: image URL first so chat apps show a preview."""
    if not product.image:
        return message
    return f"{product.image}\n\n{message}"
