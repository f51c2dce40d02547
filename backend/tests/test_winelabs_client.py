"""
Tests for the Wine Labs proxy client.

Uses httpx.MockTransport, no network.
"""

import json

import httpx
import pytest
from unittest.mock import patch

from app.services.winelabs_client import WineLabsClient, WineLabsError, extract_records

from conftest import make_proxy_client


class TestExtractRecords:
    """Tests for response envelope handling."""

    def test_bare_list(self):
        assert extract_records([{"score": 90}]) == [{"score": 90}]

    @pytest.mark.parametrize("key", ["results", "scores", "data"])
    def test_known_envelopes(self, key):
        assert extract_records({key: [{"score": 90}]}) == [{"score": 90}]

    def test_envelope_order(self):
        payload = {"data": [{"score": 1}], "results": [{"score": 2}]}
        assert extract_records(payload) == [{"score": 2}]

    def test_non_list_envelope_skipped(self):
        payload = {"results": None, "scores": [{"score": 3}]}
        assert extract_records(payload) == [{"score": 3}]

    @pytest.mark.parametrize("payload", [None, "oops", 42, {"unknown": []}, {}])
    def test_unrecognized_shapes(self, payload):
        assert extract_records(payload) == []


class TestWineLabsClient:
    """Tests for proxied Wine Labs requests."""

    @pytest.mark.asyncio
    async def test_request_envelope_and_headers(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["host"] = request.url.host
            seen["api_key"] = request.headers.get("X-API-Key")
            seen["payload"] = json.loads(request.content)
            return httpx.Response(200, json={"results": []})

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        client = WineLabsClient(base_url="https://proxy.test/", api_key="secret", http_client=http_client)

        await client.match_to_lwin_batch(["Opus One"])

        assert seen["host"] == "proxy.test"
        assert seen["api_key"] == "secret"
        assert seen["payload"] == {"endpoint": "match_to_lwin_batch", "body": {"queries": ["Opus One"]}}
        await http_client.aclose()

    @pytest.mark.asyncio
    async def test_match_batch_results(self):
        client, calls = make_proxy_client(
            lambda endpoint, body: httpx.Response(200, json={"results": [{"lwin": "1"}, None]})
        )

        results = await client.match_to_lwin_batch(["A", "B"])

        assert results == [{"lwin": "1"}, None]
        assert calls == [{"endpoint": "match_to_lwin_batch", "body": {"queries": ["A", "B"]}}]

    @pytest.mark.asyncio
    async def test_match_batch_missing_results(self):
        client, _ = make_proxy_client(lambda endpoint, body: httpx.Response(200, json={}))
        assert await client.match_to_lwin_batch(["A"]) == []

    @pytest.mark.asyncio
    async def test_price_stats_prefers_lwin(self):
        client, calls = make_proxy_client(
            lambda endpoint, body: httpx.Response(200, json={"median": 42})
        )

        data = await client.price_stats(lwin="1012781", query="ignored")

        assert data == {"median": 42}
        assert calls[0]["body"] == {"lwin": "1012781", "region": "world"}

    @pytest.mark.asyncio
    async def test_critic_scores_query_and_vintage(self):
        client, calls = make_proxy_client(
            lambda endpoint, body: httpx.Response(200, json=[])
        )

        await client.critic_scores(query="Opus One", vintage="2015")

        assert calls[0] == {
            "endpoint": "critic_scores",
            "body": {"query": "Opus One", "vintage": "2015"},
        }

    @pytest.mark.asyncio
    async def test_lookup_requires_lwin_or_query(self):
        client, calls = make_proxy_client(lambda endpoint, body: httpx.Response(200, json={}))

        with pytest.raises(ValueError):
            await client.wine_info()
        assert calls == []

    @pytest.mark.asyncio
    async def test_http_error_raises(self):
        client, _ = make_proxy_client(lambda endpoint, body: httpx.Response(503))

        with pytest.raises(WineLabsError) as exc_info:
            await client.price_stats(lwin="1")

        assert exc_info.value.status_code == 503
        assert exc_info.value.endpoint == "price_stats"
        assert "Wine Labs API error" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self):
        client, _ = make_proxy_client(lambda endpoint, body: httpx.Response(200, content=b"<html>"))

        with pytest.raises(WineLabsError):
            await client.wine_info(lwin="1")

    @pytest.mark.asyncio
    async def test_network_error_raises(self):
        def handler(endpoint, body):
            raise httpx.ConnectError("connection refused")

        client, _ = make_proxy_client(handler)

        with pytest.raises(WineLabsError) as exc_info:
            await client.match_to_lwin_batch(["A"])
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_no_retry_by_default(self):
        client, calls = make_proxy_client(lambda endpoint, body: httpx.Response(429))

        with pytest.raises(WineLabsError):
            await client.price_stats(lwin="1")
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_retries_retryable_status(self):
        responses = iter([httpx.Response(429), httpx.Response(502), httpx.Response(200, json={"median": 10})])
        client, calls = make_proxy_client(lambda endpoint, body: next(responses), max_retries=2)

        with patch.object(WineLabsClient, "_backoff", return_value=0) as backoff:
            data = await client.price_stats(lwin="1")

        assert data == {"median": 10}
        assert len(calls) == 3
        assert backoff.call_count == 2

    @pytest.mark.asyncio
    async def test_client_error_not_retried(self):
        client, calls = make_proxy_client(lambda endpoint, body: httpx.Response(400), max_retries=3)

        with pytest.raises(WineLabsError) as exc_info:
            await client.price_stats(lwin="1")
        assert exc_info.value.status_code == 400
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_context_manager_closes_owned_client(self):
        async with WineLabsClient(base_url="https://proxy.test") as client:
            inner = client._client
        assert inner.is_closed
