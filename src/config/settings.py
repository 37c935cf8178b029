# src/config/settings.py

"""Central configuration for the ml_afiliados tool."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the ml_afiliados tool."""

    # --- Marketplace ---
    SITE_ID: str = os.getenv("ML_SITE_ID", "MLB")
    API_BASE: str = "https://api.mercadolibre.com"
    TOKEN_URL: str = f"{API_BASE}/oauth/token"
    DEFAULT_LIMIT: int = 50             # Results per search (single page)
    REQUEST_TIMEOUT: int = int(os.getenv("ML_REQUEST_TIMEOUT", "15"))

    # --- Credentials (server-held, never sent to the caller) ---
    APP_ID: str = os.getenv("ML_APP_ID", "")
    CLIENT_SECRET: str = os.getenv("ML_CLIENT_SECRET", "")

    # --- Affiliate ---
    AFFILIATE_TAG: str = os.getenv("ML_AFFILIATE_TAG", "")

    # --- Gateway strategy ---
    GATEWAY_MODES: list[str] = ["direct", "proxied", "authenticated"]
    GATEWAY_MODE: str = os.getenv("ML_GATEWAY_MODE", "direct")
    PROXY_TEMPLATE: str = os.getenv(
        "ML_PROXY_TEMPLATE",
        "https://api.codetabs.com/v1/proxy?quest={url}",
    )
    AUTH_USER_AGENT: str = "ML-Afiliados/1.0"

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "pt-BR,pt;q=0.9,en-US;q=0.8",
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/120.0.0.0 Safari/537.36"
        ),
    }

    # --- Sharing ---
    WHATSAPP_SHARE_BASE: str = "https://wa.me/"

    # --- Proxy server ---
    SERVER_HOST: str = os.getenv("ML_SERVER_HOST", "127.0.0.1")
    SERVER_PORT: int = int(os.getenv("ML_SERVER_PORT", "8000"))

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"

    @classmethod
    def has_credentials(cls) -> bool:
        """Return True when both server credentials are configured."""
        return bool(cls.APP_ID and cls.CLIENT_SECRET)
