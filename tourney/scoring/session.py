from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Tuple

from tourney.client import TournamentClient
from tourney.config import get_settings
from tourney.errors import FlightNotFound
from tourney.models import CourseHole, Flight, Player
from tourney.telemetry.events import record_flight_resolved

from .style import total_for

_logger = logging.getLogger(__name__)

ScoreKey = Tuple[int, int]


class FlightSession:
    """Scoring state for one flight opened through its share token.

    The score table is keyed by ``(player_id, hole)``; a missing key means
    the hole has not been scored yet.
    """

    def __init__(self, client: TournamentClient) -> None:
        self._client = client
        self.flight: Optional[Flight] = None
        self._scores: Dict[ScoreKey, int] = {}
        self._course: Dict[int, CourseHole] = {}

    async def start(self, token: str) -> Flight:
        flight = await self.resolve(token)
        await self.load_course()
        await self.load_scores(flight)
        return flight

    async def resolve(self, token: str) -> Flight:
        # The service has no lookup-by-token endpoint; scan the full list.
        needle = (token or "").strip()
        # A failed lookup must not leave the previous flight active.
        self.flight = None
        self._scores = {}
        if not needle:
            record_flight_resolved(needle, flight_id=None)
            raise FlightNotFound(needle)
        flights = await self._client.list_flights()
        for flight in flights:
            if flight.token == needle:
                self.flight = flight
                record_flight_resolved(needle, flight_id=flight.id)
                return flight
        record_flight_resolved(needle, flight_id=None)
        raise FlightNotFound(needle)

    async def load_course(self) -> None:
        holes = await self._client.get_course()
        self._course = {hole.hole_number: hole for hole in holes}

    async def load_scores(self, flight: Optional[Flight] = None) -> None:
        flight = flight or self._require_flight()
        player_ids = flight.player_ids()
        fetched = await asyncio.gather(
            *(self._client.get_scores(player_id) for player_id in player_ids)
        )
        for player_id, player_scores in zip(player_ids, fetched):
            for hole, strokes in player_scores.items():
                self._scores[(player_id, hole)] = strokes
        _logger.debug(
            "loaded scores for flight %s (%d players)", flight.id, len(player_ids)
        )

    @property
    def client(self) -> TournamentClient:
        return self._client

    @property
    def scores(self) -> Dict[ScoreKey, int]:
        return dict(self._scores)

    @property
    def players(self) -> List[Player]:
        return list(self.flight.players) if self.flight else []

    @property
    def start_hole(self) -> int:
        return self._require_flight().starting_hole or 1

    @property
    def holes(self) -> List[int]:
        if self._course:
            return sorted(self._course)
        return list(range(1, get_settings().course_holes + 1))

    def get_score(self, player_id: int, hole: int) -> Optional[int]:
        return self._scores.get((player_id, hole))

    def display_score(self, player_id: int, hole: int) -> str:
        score = self.get_score(player_id, hole)
        return "" if score is None else str(score)

    def record_local(self, player_id: int, hole: int, strokes: int) -> None:
        self._scores[(player_id, hole)] = int(strokes)

    def restore_local(self, player_id: int, hole: int, strokes: Optional[int]) -> None:
        if strokes is None:
            self._scores.pop((player_id, hole), None)
        else:
            self._scores[(player_id, hole)] = int(strokes)

    def has_score(self, hole: int) -> bool:
        return any((player.id, hole) in self._scores for player in self.players)

    def par_for(self, hole: int) -> int:
        course_hole = self._course.get(hole)
        if course_hole is None:
            return get_settings().default_par
        return course_hole.par

    def distance_for(self, hole: int, player: Player) -> int:
        course_hole = self._course.get(hole)
        if course_hole is None:
            return 0
        return course_hole.length_for(player)

    def total_for(self, player_id: int, start_hole: int, end_hole: int) -> int:
        return total_for(self._scores, player_id, start_hole, end_hole)

    def front_total(self, player_id: int) -> int:
        return self.total_for(player_id, 1, 9)

    def back_total(self, player_id: int) -> int:
        return self.total_for(player_id, 10, 18)

    def _require_flight(self) -> Flight:
        if self.flight is None:
            raise RuntimeError("no flight resolved for this session")
        return self.flight


__all__ = ["FlightSession", "ScoreKey"]
