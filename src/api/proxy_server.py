# src/api/proxy_server.py

"""HTTP proxy in front of the marketplace search API.

GET /api/search                 anonymous search, ``q`` required
GET /api/authenticated-search   server-side OAuth, ``q`` optional
GET /api/health                 credential presence check

Both search routes answer with the upstream JSON verbatim; failures come
back as ``{"error": ..., "message": ...}``.  CORS is open to every origin.
"""

import asyncio
import logging
from typing import Any

from fastapi import FastAPI, Query, Request, Response
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.config.settings import Settings
from src.gateways.search_gateway import (
    AuthenticatedGateway,
    DirectGateway,
    GatewayConfig,
    SearchGateway,
)
from src.models.errors import (
    ConfigurationError,
    InvalidQueryError,
    MarketplaceError,
)
from src.models.search_filters import SearchFilters

logger = logging.getLogger("ml_afiliados.api")

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def filters_from_query(
    limit: int,
    sort: str | None,
    shipping: str | None,
    condition: str | None,
    deal: str | None,
    category: str | None = None,
) -> SearchFilters:
    """Translate inbound proxy parameters into SearchFilters."""
    return SearchFilters(
        sort=sort or "relevance",
        free_shipping=shipping == "free",
        condition=condition or None,
        discount=bool(deal),
        limit=limit,
        category=category or None,
    )


def _error(status: int, error: str, message: str | None = None) -> JSONResponse:
    body: dict[str, Any] = {"error": error}
    if message is not None:
        body["message"] = message
    return JSONResponse(status_code=status, content=body)


def create_app(
    public_gateway: SearchGateway | None = None,
    auth_gateway: SearchGateway | None = None,
) -> FastAPI:
    """Build the proxy app; gateways default to the configured ones."""
    app = FastAPI(title="ML Afiliados proxy", docs_url=None, redoc_url=None)
    config = GatewayConfig.from_settings()
    public = public_gateway or DirectGateway(config)
    authenticated = auth_gateway or AuthenticatedGateway(config)

    # Sent on every response; CORSMiddleware only adds them when the
    # request carries an Origin header.
    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next: Any) -> Response:
        response: Response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if exc.status_code == 405:
            return _error(405, "Method not allowed")
        return _error(exc.status_code, str(exc.detail))

    @app.api_route("/api/search", methods=["GET", "OPTIONS"])
    async def search(
        request: Request,
        q: str | None = None,
        limit: int = Settings.DEFAULT_LIMIT,
        sort: str | None = None,
        shipping: str | None = None,
        condition: str | None = None,
        deal: str | None = Query(None, alias="DEAL"),
    ) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200)
        if not q:
            return _error(400, "Query parameter is required")

        filters = filters_from_query(limit, sort, shipping, condition, deal)
        try:
            data = await asyncio.to_thread(public.fetch, q, filters)
        except InvalidQueryError:
            return _error(400, "Query parameter is required")
        except MarketplaceError as exc:
            logger.error("Public search failed: %s", exc.message)
            return _error(500, "Failed to fetch products", exc.message)
        return JSONResponse(status_code=200, content=data)

    @app.api_route("/api/authenticated-search", methods=["GET", "OPTIONS"])
    async def authenticated_search(
        request: Request,
        q: str | None = None,
        limit: int = Settings.DEFAULT_LIMIT,
        sort: str | None = None,
        shipping: str | None = None,
        condition: str | None = None,
        deal: str | None = Query(None, alias="DEAL"),
        category: str | None = None,
    ) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200)

        filters = filters_from_query(
            limit, sort, shipping, condition, deal, category
        )
        try:
            data = await asyncio.to_thread(
                authenticated.fetch, q, filters, False
            )
        except ConfigurationError as exc:
            return _error(500, "Configuration Error", exc.message)
        except MarketplaceError as exc:
            logger.error("Authenticated search failed: %s", exc.message)
            return _error(500, "Internal Server Error", exc.message)
        return JSONResponse(status_code=200, content=data)

    @app.get("/api/health")
    async def health() -> dict[str, Any]:
        return {"status": "ok", "credentials": Settings.has_credentials()}

    return app


def run_server(host: str | None = None, port: int | None = None) -> None:
    """Serve the proxy with uvicorn (blocking)."""
    import uvicorn

    host = host or Settings.SERVER_HOST
    port = port or Settings.SERVER_PORT
    logger.info("Proxy listening on http://%s:%d", host, port)
    uvicorn.run(create_app(), host=host, port=port, log_level="info")
