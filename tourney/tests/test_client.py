from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from tourney.client import TournamentClient
from tourney.config import reset_settings_cache
from tourney.errors import RecordNotFound, RequestRejected, TransientNetworkFailure


def _client(handler) -> TournamentClient:
    return TournamentClient("http://svc/", transport=httpx.MockTransport(handler))


@pytest.mark.parametrize(
    ("status", "error"),
    [
        (500, TransientNetworkFailure),
        (503, TransientNetworkFailure),
        (404, RecordNotFound),
        (400, RequestRejected),
        (422, RequestRejected),
    ],
)
def test_status_codes_map_to_errors(status, error):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"detail": "nope"})

    async def scenario():
        async with _client(handler) as client:
            with pytest.raises(error) as excinfo:
                await client.list_players()
            return excinfo.value

    exc = asyncio.run(scenario())
    if isinstance(exc, RequestRejected):
        assert exc.status_code == status
        assert exc.detail == "nope"


def test_transport_error_is_transient():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    async def scenario():
        async with _client(handler) as client:
            await client.results()

    with pytest.raises(TransientNetworkFailure):
        asyncio.run(scenario())


def test_get_scores_returns_integer_keys():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        return httpx.Response(200, json={"1": 4, "10": 5})

    async def scenario():
        async with _client(handler) as client:
            return await client.get_scores(7)

    assert asyncio.run(scenario()) == {1: 4, 10: 5}
    assert seen["url"] == "http://svc/api/scores?player_id=7"


def test_delete_flight_sends_json_body():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["body"] = request.content
        return httpx.Response(200, json={"status": "ok"})

    async def scenario():
        async with _client(handler) as client:
            await client.delete_flight(3)

    asyncio.run(scenario())
    assert seen["method"] == "DELETE"
    assert json.loads(seen["body"]) == {"id": 3}


def test_base_url_defaults_from_settings(monkeypatch):
    monkeypatch.setenv("TOURNEY_API_BASE_URL", "http://scores.local:9000")
    reset_settings_cache()
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["host"] = request.url.host
        seen["port"] = request.url.port
        return httpx.Response(200, json=[])

    async def scenario():
        client = TournamentClient(transport=httpx.MockTransport(handler))
        try:
            return await client.list_flights()
        finally:
            await client.aclose()

    assert asyncio.run(scenario()) == []
    assert seen == {"host": "scores.local", "port": 9000}
