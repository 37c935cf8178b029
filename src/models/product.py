# src/models/product.py

"""Normalized marketplace listing."""

from dataclasses import dataclass, field

# Marketplace thumbnail suffixes: "-I" is the small preview, "-O" the original
_THUMB_SUFFIX = "-I.jpg"
_ORIGINAL_SUFFIX = "-O.jpg"


@dataclass(frozen=True)
class Shipping:
    """Shipping terms of a listing."""

    free_shipping: bool = False


@dataclass(frozen=True)
class Product:
    """A single Mercado Livre listing after normalization.

    ``image`` is always derived from ``thumbnail`` and ``discount`` is
    computed by the normalizer, never read from upstream.
    """

    id: str
    title: str
    price: float
    original_price: float | None = None
    currency: str = "BRL"
    thumbnail: str = ""
    permalink: str = ""
    condition: str = ""
    available_quantity: int = 0
    sold_quantity: int = 0
    shipping: Shipping = field(default_factory=Shipping)
    discount: int = 0

    @property
    def image(self) -> str:
        """Higher-resolution variant of the thumbnail."""
        return self.thumbnail.replace(_THUMB_SUFFIX, _ORIGINAL_SUFFIX, 1)

    @property
    def has_markdown(self) -> bool:
        """True when the listing shows a struck-through original price."""
        return (
            self.original_price is not None
            and self.original_price > self.price
        )
