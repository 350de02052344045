"""Tests for src/backend/http_backend.py using httpx.MockTransport, no real network."""

import json

import httpx
import pytest

from src.backend.base import BackendError
from src.backend.http_backend import HttpAnalysisBackend


def _backend(api_config, handler) -> HttpAnalysisBackend:
    return HttpAnalysisBackend(api_config, transport=httpx.MockTransport(handler))


async def test_list_parties(sample_api_config):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/api/v1/parties"
        return httpx.Response(200, json=[{"id": 1, "name": "DMK", "color_hex": "#dd2e44", "leader": "M.K. Stalin"}])

    async with _backend(sample_api_config, handler) as backend:
        parties = await backend.list_parties()

    assert len(parties) == 1
    assert parties[0].name == "DMK"


async def test_list_parties_non_array_is_error(sample_api_config):
    async with _backend(sample_api_config, lambda r: httpx.Response(200, json={"parties": []})) as backend:
        with pytest.raises(BackendError, match="Invalid API response format"):
            await backend.list_parties()


async def test_list_parties_http_error(sample_api_config):
    async with _backend(sample_api_config, lambda r: httpx.Response(500, json={"error": "db"})) as backend:
        with pytest.raises(BackendError) as excinfo:
            await backend.list_parties()
    assert excinfo.value.status_code == 500
    assert excinfo.value.endpoint == "/parties"


async def test_transport_error_is_backend_error(sample_api_config):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _backend(sample_api_config, handler) as backend:
        with pytest.raises(BackendError, match="connection refused"):
            await backend.list_parties()


async def test_timeout_is_backend_error(sample_api_config):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    async with _backend(sample_api_config, handler) as backend:
        with pytest.raises(BackendError, match="timed out"):
            await backend.analyze("DMK")


async def test_analyze_posts_party_name(sample_api_config):
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"sentiment_score": 72, "key_topics": ["economy"], "emotion": "Hopeful"})

    async with _backend(sample_api_config, handler) as backend:
        result = await backend.analyze("DMK")

    assert seen == {"method": "POST", "path": "/api/v1/analyze", "body": {"party_name": "DMK"}}
    assert result.sentiment_score == 72
    assert result.key_topics == ("economy",)


async def test_analyze_invalid_json(sample_api_config):
    async with _backend(sample_api_config, lambda r: httpx.Response(200, text="<html>")) as backend:
        with pytest.raises(BackendError, match="not valid JSON"):
            await backend.analyze("DMK")


async def test_latest_snapshot_sends_query_param(sample_api_config):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/latest"
        assert request.url.params["party_name"] == "AIADMK"
        return httpx.Response(200, json={"exists": False})

    async with _backend(sample_api_config, handler) as backend:
        assert await backend.latest_snapshot("AIADMK") is None


async def test_latest_snapshot_exists(sample_api_config):
    payload = {"exists": True, "sentiment_score": 61.2, "key_topics": ["jobs"], "emotion": "Hopeful"}
    async with _backend(sample_api_config, lambda r: httpx.Response(200, json=payload)) as backend:
        result = await backend.latest_snapshot("DMK")
    assert result is not None
    assert result.sentiment_score == 61


async def test_latest_snapshot_404_raises(sample_api_config):
    async with _backend(sample_api_config, lambda r: httpx.Response(404, json={"error": "Party not found"})) as backend:
        with pytest.raises(BackendError) as excinfo:
            await backend.latest_snapshot("Unknown")
    assert excinfo.value.status_code == 404


async def test_history_returns_results(sample_api_config):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/history/2"
        return httpx.Response(200, json=[{"sentiment_score": 40, "created_at": "2026-10-01"}])

    async with _backend(sample_api_config, handler) as backend:
        history = await backend.history(2)
    assert [r.sentiment_score for r in history] == [40]


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"message": "Get History - To Be Implemented"}),
        httpx.Response(503, text="unavailable"),
    ],
)
async def test_history_failure_yields_empty(sample_api_config, response):
    async with _backend(sample_api_config, lambda r: response) as backend:
        assert await backend.history(1) == []
