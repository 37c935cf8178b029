# src/services/search_service.py

"""Operation boundary for searches: gateway → normalizer → result."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from src.filters.result_normalizer import ResultNormalizer
from src.gateways.search_gateway import (
    GatewayConfig,
    SearchGateway,
    create_gateway,
    extract_results,
)
from src.models.errors import MarketplaceError, UpstreamSearchError
from src.models.product import Product
from src.models.search_filters import SearchFilters

logger = logging.getLogger("ml_afiliados.service")

_USER_MESSAGES: dict[str, str] = {
    "configuration": (
        "Marketplace credentials are not configured on the server. "
        "Set ML_APP_ID and ML_CLIENT_SECRET in your .env file."
    ),
    "invalid_query": "Please enter a search term.",
    "auth": "The marketplace rejected our credentials. Check ML_APP_ID "
    "and ML_CLIENT_SECRET.",
    "api": "The marketplace returned an error instead of results.",
}
_GENERIC_MESSAGE = "Error fetching products. Please try again."
_BLOCKED_MESSAGE = (
    "The marketplace blocked the request (HTTP 403). Try another gateway "
    "mode (--mode authenticated) or run the proxy server."
)


def user_message_for(error: MarketplaceError) -> str:
    """Human-readable message for a failed search."""
    if isinstance(error, UpstreamSearchError) and error.status == 403:
        return _BLOCKED_MESSAGE
    return _USER_MESSAGES.get(error.kind, _GENERIC_MESSAGE)


@dataclass
class SearchResult:
    """Outcome of one search: products on success, a typed error otherwise."""

    query: str
    filters: SearchFilters = field(default_factory=SearchFilters)
    products: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    total_available: int = 0
    error: MarketplaceError | None = None
    user_message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


class SearchService:
    """Runs a gateway off the event loop and normalizes its payload.

    Every MarketplaceError is caught here and turned into a failed
    SearchResult; nothing network-related escapes to the UI.
    """

    def __init__(
        self,
        gateway: SearchGateway | None = None,
        config: GatewayConfig | None = None,
    ) -> None:
        self.gateway = gateway or create_gateway(
            config or GatewayConfig.from_settings()
        )

    async def _run(
        self,
        query: str,
        filters: SearchFilters,
        require_query: bool,
    ) -> SearchResult:
        result = SearchResult(query=query, filters=filters)
        try:
            payload: Any = await asyncio.to_thread(
                self.gateway.fetch, query, filters, require_query
            )
            listings = extract_results(payload)
        except MarketplaceError as exc:
            logger.error(
                "Search '%s' failed (%s): %s", query, exc.kind, exc.message
            )
            result.error = exc
            result.user_message = user_message_for(exc)
            return result

        result.products = ResultNormalizer.normalize_results(listings)
        paging = payload.get("paging") if isinstance(payload, dict) else None
        if not isinstance(paging, dict):
            paging = {}
        result.total_available = int(
            paging.get("total", len(result.products)) or 0
        )
        logger.info(
            "Search '%s' returned %d products", query, len(result.products)
        )
        return result

    async def search(
        self,
        query: str,
        filters: SearchFilters | None = None,
    ) -> SearchResult:
        """Search the catalog for ``query`` with the given filters."""
        return await self._run(
            query, filters or SearchFilters(), require_query=True
        )

    async def get_deals(
        self,
        category: str | None = None,
        limit: int | None = None,
    ) -> SearchResult:
        """Marked-down listings, cheapest first, optionally per category."""
        filters = (
            SearchFilters.deals(category, limit)
            if limit is not None
            else SearchFilters.deals(category)
        )
        return await self._run("", filters, require_query=False)
