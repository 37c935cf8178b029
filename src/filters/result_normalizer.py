# src/filters/result_normalizer.py

"""Raw marketplace listings → Product records."""

import logging
import math
from typing import Any

from src.models.product import Product, Shipping

logger = logging.getLogger("ml_afiliados.filters")


def compute_discount(price: float, original_price: float | None) -> int:
    """Percent markdown, rounded half-up; 0 without a real markdown."""
    if not original_price or original_price <= price:
        return 0
    ratio = (original_price - price) / original_price * 100
    return int(math.floor(ratio + 0.5))


class ResultNormalizer:
    """Map upstream listings onto the canonical Product record."""

    @staticmethod
    def _to_float(value: Any) -> float | None:
        try:
            return float(value) if value is not None else None
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _to_count(value: Any) -> int:
        try:
            return max(0, int(value))
        except (TypeError, ValueError):
            return 0

    @staticmethod
    def normalize_listing(raw: dict[str, Any]) -> Product:
        """Build a Product from one listing; missing fields use defaults."""
        price = ResultNormalizer._to_float(raw.get("price")) or 0.0
        original = ResultNormalizer._to_float(raw.get("original_price"))
        shipping = raw.get("shipping") or {}

        return Product(
            id=str(raw.get("id") or ""),
            title=str(raw.get("title") or ""),
            price=price,
            # 0 / null both mean "no markdown"
            original_price=original or None,
            currency=str(raw.get("currency_id") or "BRL"),
            thumbnail=str(raw.get("thumbnail") or ""),
            permalink=str(raw.get("permalink") or ""),
            condition=str(raw.get("condition") or ""),
            available_quantity=ResultNormalizer._to_count(
                raw.get("available_quantity")
            ),
            sold_quantity=ResultNormalizer._to_count(
                raw.get("sold_quantity")
            ),
            shipping=Shipping(
                free_shipping=bool(shipping.get("free_shipping", False))
                if isinstance(shipping, dict)
                else False
            ),
            discount=compute_discount(price, original),
        )

    @staticmethod
    def normalize_results(listings: list[dict[str, Any]]) -> list[Product]:
        """Order-preserving, one-to-one normalization."""
        products = [
            ResultNormalizer.normalize_listing(raw) for raw in listings
        ]
        logger.debug("Normalized %d listings", len(products))
        return products
