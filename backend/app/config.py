"""
Centralized configuration for the Wine List Scanner backend.

All constants are defined here to avoid scattered magic numbers
and enable easy configuration management.
"""

import os
from typing import Optional


class Config:
    """Application configuration constants."""

    # === Identity Matching ===
    # Wine Labs batch matching is chunked to stay under the proxy's 60s limit
    MATCH_CHUNK_SIZE = 20
    MIN_QUERY_TOKEN_LENGTH = 3

    # Token-overlap ratio -> match confidence bands (ratio floor, confidence)
    CONFIDENCE_BANDS = (
        (0.8, 0.9),
        (0.6, 0.75),
        (0.4, 0.6),
    )
    CONFIDENCE_FLOOR = 0.4

    # === Web Search Fallback ===
    # Web search reports confidence on a 0-100 scale
    WEB_SEARCH_ACCEPT_THRESHOLD = 30
    WEB_SEARCH_GOOD_CONFIDENCE = 50
    WEB_SEARCH_TRUNCATED_CONFIDENCE = 20
    WEB_SEARCH_INCOMPLETE_CONFIDENCE = 15
    WEB_SEARCH_TEMPERATURE = 0.2
    WEB_SEARCH_MAX_OUTPUT_TOKENS = 8192
    CRITIC_SEARCH_MAX_OUTPUT_TOKENS = 2048

    # === Pricing ===
    DEFAULT_PRICE_REGION = "world"

    # === Markup Tiers (percent) ===
    MARKUP_REASONABLE_MAX = 100
    MARKUP_MODERATE_MAX = 200

    # === HTTP ===
    DEFAULT_HTTP_TIMEOUT = 60.0
    RETRY_BASE_DELAY = 0.5
    RETRY_MAX_DELAY = 8.0
    RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)

    # === Environment ===
    @staticmethod
    def use_mocks() -> bool:
        """Check if mock mode is enabled."""
        return os.getenv("USE_MOCKS", "false").lower() == "true"

    @staticmethod
    def winelabs_base_url() -> str:
        """Wine Labs proxy URL (the proxy forwards {endpoint, body} requests)."""
        return os.getenv(
            "WINELABS_PROXY_URL",
            "https://winelabs-proxy-dlfk6dpu3q-uc.a.run.app",
        )

    @staticmethod
    def winelabs_api_key() -> Optional[str]:
        """Optional Wine Labs API key, sent as X-API-Key."""
        return os.getenv("WINELABS_API_KEY")

    @staticmethod
    def winelabs_max_retries() -> int:
        """Retries for retryable Wine Labs failures. Default: 0 (no retry)."""
        try:
            return max(0, int(os.getenv("WINELABS_MAX_RETRIES", "0")))
        except ValueError:
            return 0

    @staticmethod
    def http_timeout() -> float:
        """Timeout in seconds for outbound HTTP calls."""
        try:
            return float(os.getenv("HTTP_TIMEOUT", str(Config.DEFAULT_HTTP_TIMEOUT)))
        except ValueError:
            return Config.DEFAULT_HTTP_TIMEOUT

    @staticmethod
    def gemini_api_key() -> Optional[str]:
        """Get Google Gemini API key from environment."""
        return os.getenv("GOOGLE_API_KEY")

    @staticmethod
    def web_search_model() -> str:
        """Gemini model used for grounded web search. Default: gemini-2.5-flash."""
        return os.getenv("WEB_SEARCH_MODEL", "gemini-2.5-flash")

    @staticmethod
    def log_level() -> str:
        """Log level (DEBUG, INFO, WARNING, ERROR)."""
        return os.getenv("LOG_LEVEL", "INFO").upper()
