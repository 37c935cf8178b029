# src/models/errors.py

"""Error taxonomy for marketplace calls.

Every failure crossing the network boundary is one of these, so callers
can branch on ``kind`` instead of on transport exceptions.
"""


class MarketplaceError(Exception):
    """Base class for all marketplace failures."""

    kind: str = "marketplace"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(MarketplaceError):
    """Server credentials are missing."""

    kind = "configuration"


class InvalidQueryError(MarketplaceError):
    """The caller sent an empty search term."""

    kind = "invalid_query"


class UpstreamHTTPError(MarketplaceError):
    """Non-2xx (or unreachable) upstream response."""

    def __init__(self, message: str, status: int, body: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class UpstreamAuthError(UpstreamHTTPError):
    """Token endpoint rejected the client credentials."""

    kind = "auth"


class UpstreamSearchError(UpstreamHTTPError):
    """Search endpoint rejected the request."""

    kind = "search"


class UpstreamApiError(MarketplaceError):
    """2xx response whose body carries an error instead of results."""

    kind = "api"


class MalformedTagWarning(UserWarning):
    """Affiliate tag could not be parsed; the link is left untouched."""
