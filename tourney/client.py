"""Async client for the record-oriented tournament service."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

import httpx

from .config import get_settings
from .errors import RecordNotFound, RequestRejected, TransientNetworkFailure
from .models import CourseHole, Flight, Player, PlayerResult

_logger = logging.getLogger(__name__)


def _http_client_factory(**kwargs: Any) -> httpx.AsyncClient:
    timeout = kwargs.pop("timeout", 10.0)
    return httpx.AsyncClient(timeout=timeout, **kwargs)


class TournamentClient:
    """Thin async wrapper around the tournament service endpoints.

    Every method either returns parsed records or raises one of
    :class:`TransientNetworkFailure`, :class:`RecordNotFound` or
    :class:`RequestRejected`, so callers can tell "the service said no"
    apart from "the service could not be reached".
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        kwargs: Dict[str, Any] = {
            "base_url": (base_url or settings.api_base_url).rstrip("/"),
            "timeout": timeout if timeout is not None else settings.http_timeout,
        }
        if transport is not None:
            kwargs["transport"] = transport
        self._http = _http_client_factory(**kwargs)

    async def __aenter__(self) -> "TournamentClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            _logger.warning(
                "tournament service unreachable: %s %s (%s)", method, path, exc
            )
            raise TransientNetworkFailure(f"{method} {path} failed: {exc}") from exc
        if response.status_code >= 500:
            raise TransientNetworkFailure(
                f"{method} {path} failed: {response.status_code}"
            )
        if response.status_code == 404:
            raise RecordNotFound(f"{method} {path}: {_detail(response)}")
        if response.status_code >= 400:
            raise RequestRejected(response.status_code, _detail(response))
        return response

    # Players -----------------------------------------------------------

    async def list_players(self) -> List[Player]:
        response = await self._request("GET", "/api/players")
        return [Player.model_validate(row) for row in response.json() or []]

    async def save_player(self, player: Player) -> None:
        await self._request("POST", "/api/players", json=player.model_dump())

    async def delete_player(self, player_id: int) -> None:
        await self._request("POST", "/api/players/delete", json={"id": player_id})

    async def import_players(self, filename: str, content: bytes) -> int:
        response = await self._request(
            "POST",
            "/api/players/import",
            files={"file": (filename, content, "text/csv")},
        )
        return int(response.json().get("imported", 0))

    # Flights -----------------------------------------------------------

    async def list_flights(self) -> List[Flight]:
        response = await self._request("GET", "/api/flights")
        return [Flight.model_validate(row) for row in response.json() or []]

    async def create_flight(self, name: str, starting_hole: int = 1) -> Flight:
        response = await self._request(
            "POST",
            "/api/flights",
            json={"name": name, "starting_hole": starting_hole},
        )
        return Flight.model_validate(response.json())

    async def update_flight(
        self, flight_id: int, name: str, starting_hole: int
    ) -> None:
        await self._request(
            "POST",
            "/api/flights/update",
            json={"id": flight_id, "name": name, "starting_hole": starting_hole},
        )

    async def delete_flight(self, flight_id: int) -> None:
        await self._request("DELETE", "/api/flights", json={"id": flight_id})

    async def assign_player(self, flight_id: int, player_id: int) -> None:
        await self._request(
            "POST",
            "/api/flights/assign",
            json={"flight_id": flight_id, "player_id": player_id},
        )

    async def unassign_player(self, player_id: int) -> None:
        await self._request(
            "POST", "/api/flights/unassign", json={"player_id": player_id}
        )

    async def random_assign(self) -> int:
        response = await self._request("POST", "/api/flights/random-assign")
        return int(response.json().get("assigned", 0))

    # Scores ------------------------------------------------------------

    async def get_scores(self, player_id: int) -> Dict[int, int]:
        response = await self._request(
            "GET", "/api/scores", params={"player_id": player_id}
        )
        payload = response.json() or {}
        return {int(hole): int(strokes) for hole, strokes in payload.items()}

    async def submit_score(self, player_id: int, hole: int, strokes: int) -> None:
        await self._request(
            "POST",
            "/api/scores",
            json={"player_id": player_id, "hole_number": hole, "strokes": int(strokes)},
        )

    async def results(self) -> List[PlayerResult]:
        response = await self._request("GET", "/api/results")
        return [PlayerResult.model_validate(row) for row in response.json() or []]

    # Course ------------------------------------------------------------

    async def get_course(self) -> List[CourseHole]:
        response = await self._request("GET", "/api/course")
        return [CourseHole.model_validate(row) for row in response.json() or []]

    async def save_course(self, holes: Iterable[CourseHole]) -> None:
        await self._request(
            "POST", "/api/course", json=[hole.model_dump() for hole in holes]
        )

    async def import_course(self, filename: str, content: bytes) -> int:
        response = await self._request(
            "POST",
            "/api/course/import",
            files={"file": (filename, content, "text/csv")},
        )
        return int(response.json().get("updated", 0))

    async def export_course(self) -> str:
        response = await self._request("GET", "/api/course/export")
        return response.text


def _detail(response: httpx.Response) -> Optional[Any]:
    try:
        payload = response.json()
    except ValueError:
        return response.text or None
    if isinstance(payload, dict) and "detail" in payload:
        return payload["detail"]
    return payload


__all__ = ["TournamentClient"]
