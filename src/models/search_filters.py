# src/models/search_filters.py

"""Request-scoped search filters."""

from dataclasses import dataclass
from enum import Enum

from src.config.settings import Settings


class SortOrder(str, Enum):
    """Result ordering understood by the marketplace."""

    RELEVANCE = "relevance"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"


class Condition(str, Enum):
    """Item condition filter values."""

    NEW = "new"
    USED = "used"


@dataclass(frozen=True)
class SearchFilters:
    """Filters applied to one search; never persisted."""

    sort: SortOrder | str = SortOrder.RELEVANCE
    free_shipping: bool = False
    condition: Condition | str | None = None
    discount: bool = False
    limit: int = Settings.DEFAULT_LIMIT
    category: str | None = None

    @classmethod
    def deals(
        cls,
        category: str | None = None,
        limit: int = Settings.DEFAULT_LIMIT,
    ) -> "SearchFilters":
        """Fixed filter set for the deals listing."""
        return cls(
            sort=SortOrder.PRICE_ASC,
            discount=True,
            limit=limit,
            category=category,
        )
