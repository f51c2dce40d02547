"""
Wine Labs API client.

All calls go through a JSON proxy that forwards {"endpoint", "body"} to
external-api.wine-labs.com and adds credentials server-side.

Endpoints used:
- match_to_lwin_batch: wine name queries → LWIN identifiers
- price_stats: market price distribution for a wine
- critic_scores: critic ratings for a wine
- wine_info: descriptive metadata (varietal, colour, region)
"""

import asyncio
import logging
import random
from typing import Any, Optional, Sequence

import httpx

from ..config import Config

logger = logging.getLogger(__name__)


class WineLabsError(Exception):
    """A Wine Labs request failed (HTTP error, network error or bad JSON)."""

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.endpoint = endpoint
        self.status_code = status_code


# Envelope keys tried in order after a bare list
ENVELOPE_KEYS = ("results", "scores", "data")


def extract_records(payload: Any, keys: Sequence[str] = ENVELOPE_KEYS) -> list:
    """
    Pull the record list out of a loosely-typed response envelope.

    Accepts a bare list or a dict wrapping the list under one of ``keys``
    (first match wins). Anything else is treated as "no data".
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in keys:
            value = payload.get(key)
            if isinstance(value, list):
                return value
    return []


class WineLabsClient:
    """
    Async client for the Wine Labs proxy.

    Errors are raised as WineLabsError; deciding whether a failure is fatal
    is left to callers. Retries (off by default) cover 429/5xx responses and
    network errors with exponential backoff plus jitter.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize client.

        Args:
            base_url: Proxy URL. Falls back to WINELABS_PROXY_URL.
            api_key: Optional API key. Falls back to WINELABS_API_KEY.
            timeout: Request timeout in seconds. Falls back to HTTP_TIMEOUT.
            max_retries: Retries for retryable failures. Falls back to WINELABS_MAX_RETRIES.
            http_client: Pre-built httpx client (tests, shared pools). Not closed by aclose().
        """
        self.base_url = (base_url or Config.winelabs_base_url()).rstrip("/")
        self.api_key = api_key if api_key is not None else Config.winelabs_api_key()
        self.timeout = timeout if timeout is not None else Config.http_timeout()
        self.max_retries = max_retries if max_retries is not None else Config.winelabs_max_retries()
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=self.timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "WineLabsClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        return headers

    @staticmethod
    def _backoff(attempt: int) -> float:
        base_wait = min(Config.RETRY_MAX_DELAY, Config.RETRY_BASE_DELAY * 2 ** attempt)
        return base_wait + random.uniform(0, base_wait * 0.5)

    async def _post(self, endpoint: str, body: dict[str, Any]) -> Any:
        """POST one proxied request and return the decoded JSON body."""
        payload = {"endpoint": endpoint, "body": body}

        for attempt in range(self.max_retries + 1):
            try:
                response = await self._client.post(
                    self.base_url,
                    json=payload,
                    headers=self._headers(),
                )
            except httpx.RequestError as e:
                if attempt < self.max_retries:
                    wait_time = self._backoff(attempt)
                    logger.warning(
                        f"Wine Labs {endpoint}: network error ({e}), "
                        f"retry {attempt + 1}/{self.max_retries} in {wait_time:.1f}s"
                    )
                    await asyncio.sleep(wait_time)
                    continue
                raise WineLabsError(
                    f"Wine Labs API request failed: {e}", endpoint=endpoint
                ) from e

            if response.status_code in Config.RETRYABLE_STATUS_CODES and attempt < self.max_retries:
                wait_time = self._backoff(attempt)
                logger.warning(
                    f"Wine Labs {endpoint}: HTTP {response.status_code}, "
                    f"retry {attempt + 1}/{self.max_retries} in {wait_time:.1f}s"
                )
                await asyncio.sleep(wait_time)
                continue

            if not response.is_success:
                raise WineLabsError(
                    f"Wine Labs API error: {response.reason_phrase or response.status_code}",
                    endpoint=endpoint,
                    status_code=response.status_code,
                )

            try:
                return response.json()
            except ValueError as e:
                raise WineLabsError(
                    f"Wine Labs API returned invalid JSON: {e}",
                    endpoint=endpoint,
                    status_code=response.status_code,
                ) from e

        # range() always runs at least once and every path returns or raises
        raise WineLabsError("Wine Labs retries exhausted", endpoint=endpoint)

    @staticmethod
    def _lookup_body(lwin: Optional[str], query: Optional[str]) -> dict[str, Any]:
        if lwin:
            return {"lwin": lwin}
        if query:
            return {"query": query}
        raise ValueError("Either query or lwin must be provided")

    async def match_to_lwin_batch(self, queries: list[str]) -> list:
        """
        Match a batch of wine name queries.

        Returns the raw per-query records (dicts, or None for no match). The
        list may be shorter than ``queries`` if the service drops entries.
        """
        data = await self._post("match_to_lwin_batch", {"queries": queries})
        return extract_records(data, keys=("results",))

    async def price_stats(
        self,
        lwin: Optional[str] = None,
        query: Optional[str] = None,
        region: str = Config.DEFAULT_PRICE_REGION,
    ) -> Any:
        """Fetch raw price statistics for an LWIN (preferred) or free-text query."""
        body = self._lookup_body(lwin, query)
        body["region"] = region
        return await self._post("price_stats", body)

    async def critic_scores(
        self,
        lwin: Optional[str] = None,
        query: Optional[str] = None,
        vintage: Optional[str] = None,
    ) -> Any:
        """Fetch the raw critic scores payload (envelope shape varies)."""
        body = self._lookup_body(lwin, query)
        if vintage:
            body["vintage"] = vintage
        return await self._post("critic_scores", body)

    async def wine_info(
        self,
        lwin: Optional[str] = None,
        query: Optional[str] = None,
    ) -> Any:
        """Fetch raw wine metadata."""
        return await self._post("wine_info", self._lookup_body(lwin, query))
