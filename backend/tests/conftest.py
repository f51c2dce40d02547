"""
Pytest configuration for the wine list scanner tests.
"""

import json
from typing import Callable

import httpx
import pytest

from app.feature_flags import FeatureFlags, get_feature_flags
from app.services.winelabs_client import WineLabsClient


# Configure pytest-asyncio markers
def pytest_configure(config):
    """Register the asyncio marker."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as an asyncio test"
    )


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep tests independent of a developer's .env / shell settings."""
    for name in (
        "USE_MOCKS",
        "WINELABS_MAX_RETRIES",
        "WINELABS_API_KEY",
        "GOOGLE_API_KEY",
        "FEATURE_WEB_SEARCH_FALLBACK",
        "FEATURE_CRITIC_SCORE_FALLBACK",
        "FEATURE_WINE_INFO",
    ):
        monkeypatch.delenv(name, raising=False)
    get_feature_flags.cache_clear()
    yield
    get_feature_flags.cache_clear()


@pytest.fixture
def all_flags_on() -> FeatureFlags:
    return FeatureFlags(
        feature_web_search_fallback=True,
        feature_critic_score_fallback=True,
        feature_wine_info=True,
    )


def make_proxy_client(
    handler: Callable[[str, dict], httpx.Response],
    **kwargs,
) -> tuple[WineLabsClient, list[dict]]:
    """
    WineLabsClient backed by httpx.MockTransport.

    ``handler(endpoint, body)`` answers each proxied request. Returns the
    client and the list of recorded request payloads.
    """
    calls: list[dict] = []

    def _transport(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        calls.append(payload)
        return handler(payload["endpoint"], payload["body"])

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_transport))
    client = WineLabsClient(
        base_url="https://proxy.test",
        api_key="test-key",
        timeout=5.0,
        http_client=http_client,
        **kwargs,
    )
    return client, calls
