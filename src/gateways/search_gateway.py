# src/gateways/search_gateway.py

"""Search gateway strategies for the marketplace search endpoint.

Three interchangeable ways to reach the same ``/sites/<site>/search``
resource: ``direct`` (anonymous), ``proxied`` (through a third-party CORS
proxy) and ``authenticated`` (bearer token from the OAuth endpoint).
All of them return the raw JSON payload; normalization happens elsewhere.
"""

import logging
import urllib.parse
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.gateways.token_acquirer import TokenAcquirer
from src.models.errors import (
    InvalidQueryError,
    UpstreamApiError,
    UpstreamSearchError,
)
from src.models.search_filters import SearchFilters, SortOrder

logger = logging.getLogger("ml_afiliados.gateway")

# encodeURIComponent leaves these unescaped; CORS proxies expect the same
_URI_COMPONENT_SAFE = "!~*'()"


@dataclass(frozen=True)
class GatewayConfig:
    """Explicit configuration handed to a gateway at construction."""

    mode: str = Settings.GATEWAY_MODE
    site_id: str = Settings.SITE_ID
    api_base: str = Settings.API_BASE
    proxy_template: str = Settings.PROXY_TEMPLATE
    app_id: str = ""
    client_secret: str = ""
    token_url: str = Settings.TOKEN_URL
    timeout: int = Settings.REQUEST_TIMEOUT

    @classmethod
    def from_settings(cls, mode: str | None = None) -> "GatewayConfig":
        """Build a config from the process-wide Settings."""
        return cls(
            mode=mode or Settings.GATEWAY_MODE,
            site_id=Settings.SITE_ID,
            api_base=Settings.API_BASE,
            proxy_template=Settings.PROXY_TEMPLATE,
            app_id=Settings.APP_ID,
            client_secret=Settings.CLIENT_SECRET,
            token_url=Settings.TOKEN_URL,
            timeout=Settings.REQUEST_TIMEOUT,
        )

    @property
    def search_url(self) -> str:
        """Site-scoped search endpoint."""
        return f"{self.api_base}/sites/{self.site_id}/search"


def _plain(value: Any) -> str:
    """Unwrap enum members to their wire value."""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def coerce_limit(limit: Any) -> int:
    """Coerce a limit to a non-negative integer (no upper bound)."""
    try:
        return max(0, int(limit))
    except (TypeError, ValueError):
        logger.debug("Unusable limit %r, using default", limit)
        return Settings.DEFAULT_LIMIT


def build_search_params(
    query: str | None,
    filters: SearchFilters,
) -> list[tuple[str, str]]:
    """Map a query and filter set to marketplace query parameters."""
    params: list[tuple[str, str]] = []
    if query:
        params.append(("q", query))
    params.append(("limit", str(coerce_limit(filters.limit))))

    sort = _plain(filters.sort) if filters.sort else ""
    if sort and sort != SortOrder.RELEVANCE.value:
        params.append(("sort", sort))
    if filters.free_shipping:
        params.append(("shipping", "free"))
    if filters.condition:
        params.append(("condition", _plain(filters.condition)))
    if filters.discount:
        params.append(("DEAL", "true"))
    if filters.category:
        params.append(("category", filters.category))
    return params


def extract_results(payload: Any) -> list[dict[str, Any]]:
    """Return the listings collection of a search payload.

    A body without ``results`` counts as zero results unless it carries an
    upstream ``error`` indicator. A body that is not a JSON object (``null``
    or an array) also counts as zero results.

    Raises:
        UpstreamApiError: the payload is an error envelope.
    """
    if not isinstance(payload, dict):
        return []
    results = payload.get("results")
    if results is None:
        if payload.get("error"):
            detail = payload.get("message") or payload["error"]
            raise UpstreamApiError(f"ML API Error: {detail}")
        return []
    if not isinstance(results, list):
        return []
    return list(results)


class SearchGateway(ABC):
    """Base class for every search strategy."""

    mode: str = ""

    def __init__(
        self,
        config: GatewayConfig,
        session: curl_requests.Session | None = None,
    ) -> None:
        self.config = config
        self.logger = logging.getLogger(f"ml_afiliados.gateway.{self.mode}")
        self.session = session or curl_requests.Session(
            impersonate=Settings.IMPERSONATE_BROWSER
        )

    def target_url(self, params: list[tuple[str, str]]) -> str:
        """Full marketplace URL for the given parameters."""
        return f"{self.config.search_url}?{urllib.parse.urlencode(params)}"

    @abstractmethod
    def _request_url(self, params: list[tuple[str, str]]) -> str:
        """URL actually fetched by this strategy."""
        ...

    @abstractmethod
    def _headers(self) -> dict[str, str]:
        """Headers for the search request."""
        ...

    def fetch(
        self,
        query: str | None,
        filters: SearchFilters | None = None,
        require_query: bool = True,
    ) -> Any:
        """Run one search and return the raw upstream payload.

        Raises:
            InvalidQueryError: empty query where one is required.
            ConfigurationError: authenticated mode without credentials.
            UpstreamAuthError: token exchange failed.
            UpstreamSearchError: non-2xx or unreachable search endpoint.
        """
        query = (query or "").strip()
        if require_query and not query:
            raise InvalidQueryError("Query parameter is required")

        params = build_search_params(query, filters or SearchFilters())
        headers = self._headers()
        url = self._request_url(params)
        self.logger.info("[%s] Searching: %s", self.mode, url)

        try:
            resp = self.session.get(
                url, headers=headers, timeout=self.config.timeout
            )
        except Exception as exc:
            self.logger.error(
                "[%s] Search request failed: %s",
                self.mode,
                exc,
                exc_info=True,
            )
            raise UpstreamSearchError(
                f"Search request failed: {exc}", status=0, body=str(exc)
            ) from exc

        if not 200 <= resp.status_code < 300:
            self.logger.error(
                "[%s] Search returned HTTP %d: %s",
                self.mode,
                resp.status_code,
                resp.text,
            )
            raise UpstreamSearchError(
                f"Search API returned {resp.status_code}",
                status=resp.status_code,
                body=resp.text,
            )

        try:
            payload: dict[str, Any] = resp.json()
        except ValueError as exc:
            raise UpstreamSearchError(
                "Search API returned a non-JSON body",
                status=resp.status_code,
                body=resp.text,
            ) from exc
        return payload


class DirectGateway(SearchGateway):
    """Anonymous call straight to the marketplace API."""

    mode = "direct"

    def _request_url(self, params: list[tuple[str, str]]) -> str:
        return self.target_url(params)

    def _headers(self) -> dict[str, str]:
        return dict(Settings.DEFAULT_HEADERS)


class ProxiedGateway(SearchGateway):
    """Anonymous call relayed through a third-party CORS proxy."""

    mode = "proxied"

    def _request_url(self, params: list[tuple[str, str]]) -> str:
        encoded = urllib.parse.quote(
            self.target_url(params), safe=_URI_COMPONENT_SAFE
        )
        return self.config.proxy_template.format(url=encoded)

    def _headers(self) -> dict[str, str]:
        return {"Accept": "application/json"}


class AuthenticatedGateway(SearchGateway):
    """Bearer-authenticated call; reacquires a token on every search."""

    mode = "authenticated"

    def __init__(
        self,
        config: GatewayConfig,
        session: curl_requests.Session | None = None,
        token_acquirer: TokenAcquirer | None = None,
    ) -> None:
        super().__init__(config, session)
        self.token_acquirer = token_acquirer or TokenAcquirer(
            config.app_id,
            config.client_secret,
            session=self.session,
            token_url=config.token_url,
            timeout=config.timeout,
        )

    def _request_url(self, params: list[tuple[str, str]]) -> str:
        return self.target_url(params)

    def _headers(self) -> dict[str, str]:
        token = self.token_acquirer.acquire()
        return {
            "Authorization": f"Bearer {token}",
            "User-Agent": Settings.AUTH_USER_AGENT,
        }


GATEWAY_CLASSES: dict[str, type[SearchGateway]] = {
    DirectGateway.mode: DirectGateway,
    ProxiedGateway.mode: ProxiedGateway,
    AuthenticatedGateway.mode: AuthenticatedGateway,
}


def create_gateway(
    config: GatewayConfig,
    session: curl_requests.Session | None = None,
) -> SearchGateway:
    """Instantiate the strategy named by ``config.mode``."""
    try:
        gateway_cls = GATEWAY_CLASSES[config.mode]
    except KeyError:
        valid = ", ".join(sorted(GATEWAY_CLASSES))
        raise ValueError(
            f"Unknown gateway mode '{config.mode}' (expected: {valid})"
        ) from None
    return gateway_cls(config, session=session)
