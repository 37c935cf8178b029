# src/gateways/token_acquirer.py

"""OAuth client-credentials exchange against the marketplace."""

import logging

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.models.errors import ConfigurationError, UpstreamAuthError

logger = logging.getLogger("ml_afiliados.auth")


class TokenAcquirer:
    """Trade the server-held app id/secret for a bearer token.

    Tokens are not cached: each search asks for a fresh one.
    """

    def __init__(
        self,
        app_id: str,
        client_secret: str,
        session: curl_requests.Session | None = None,
        token_url: str = Settings.TOKEN_URL,
        timeout: int = Settings.REQUEST_TIMEOUT,
    ) -> None:
        self.app_id = app_id
        self.client_secret = client_secret
        self.token_url = token_url
        self.timeout = timeout
        self.session = session or curl_requests.Session(
            impersonate=Settings.IMPERSONATE_BROWSER
        )

    def acquire(self) -> str:
        """Return a bearer token for one request.

        Raises:
            ConfigurationError: app id or secret is empty.
            UpstreamAuthError: the token endpoint refused or was unreachable.
        """
        if not self.app_id or not self.client_secret:
            logger.error("Marketplace API credentials are not configured")
            raise ConfigurationError(
                "Mercado Livre API credentials are not configured "
                "on the server (ML_APP_ID / ML_CLIENT_SECRET)."
            )

        try:
            resp = self.session.post(
                self.token_url,
                headers={
                    "Content-Type": "application/x-www-form-urlencoded",
                    "Accept": "application/json",
                },
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.app_id,
                    "client_secret": self.client_secret,
                },
                timeout=self.timeout,
            )
        except Exception as exc:
            logger.error(
                "Token request failed: %s", exc, exc_info=True
            )
            raise UpstreamAuthError(
                f"Authentication request failed: {exc}",
                status=0,
                body=str(exc),
            ) from exc

        if not 200 <= resp.status_code < 300:
            logger.error(
                "Token endpoint returned HTTP %d: %s",
                resp.status_code,
                resp.text,
            )
            raise UpstreamAuthError(
                f"Authentication failed: {resp.status_code}",
                status=resp.status_code,
                body=resp.text,
            )

        try:
            token = resp.json().get("access_token", "")
        except ValueError:
            token = ""
        if not token:
            raise UpstreamAuthError(
                "Authentication response carried no access_token",
                status=resp.status_code,
                body=resp.text,
            )
        logger.debug("Acquired access token")
        return str(token)
