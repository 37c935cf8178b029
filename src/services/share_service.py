# src/services/share_service.py

"""Everything needed to share one product."""

from dataclasses import dataclass

from src.models.product import Product
from src.sharing.affiliate_link import generate_affiliate_link
from src.sharing.message_composer import (
    compose_clipboard_text,
    generate_whatsapp_message,
)
from src.sharing.share_dispatcher import get_whatsapp_share_url


@dataclass(frozen=True)
class SharePayload:
    """Affiliate link, message, clipboard text and WhatsApp link."""

    affiliate_link: str
    message: str
    clipboard_text: str
    whatsapp_url: str


def build_share_payload(
    product: Product,
    affiliate_tag: str | None,
    phone_number: str | None = None,
) -> SharePayload:
    link = generate_affiliate_link(product.permalink, affiliate_tag)
    message = generate_whatsapp_message(product, link)
    return SharePayload(
        affiliate_link=link,
        message=message,
        clipboard_text=compose_clipboard_text(product, message),
        whatsapp_url=get_whatsapp_share_url(message, phone_number),
    )
