from __future__ import annotations

import logging
import random
import secrets
import threading
from typing import Dict, Iterable, List, Optional, Tuple

from tourney.config import get_settings
from tourney.models import CourseHole, Flight, Player, PlayerResult

_logger = logging.getLogger(__name__)


class FlightFull(ValueError):
    """The target flight already holds its maximum number of players."""


class MemoryTournamentRepository:
    def __init__(
        self,
        *,
        hole_count: int | None = None,
        capacity: int | None = None,
        max_strokes: int | None = None,
        rng: random.Random | None = None,
    ) -> None:
        settings = get_settings()
        self._lock = threading.Lock()
        self._capacity = capacity or settings.flight_capacity
        self._max_strokes = max_strokes or settings.max_strokes
        self._rng = rng or random.Random()
        self._players: Dict[int, Player] = {}
        self._flights: Dict[int, Flight] = {}
        self._members: Dict[int, List[int]] = {}
        self._scores: Dict[Tuple[int, int], int] = {}
        self._next_player_id = 1
        self._next_flight_id = 1
        count = hole_count or settings.course_holes
        length = settings.default_hole_length
        self._holes: Dict[int, CourseHole] = {
            number: CourseHole(
                hole_number=number,
                par=settings.default_par,
                length_yellow=length,
                length_red=length,
            )
            for number in range(1, count + 1)
        }

    @property
    def capacity(self) -> int:
        return self._capacity

    # Players -----------------------------------------------------------

    def list_players(self) -> List[Player]:
        with self._lock:
            return [self._players[key].model_copy() for key in sorted(self._players)]

    def save_player(self, player: Player) -> Tuple[str, Player]:
        with self._lock:
            if player.id > 0:
                if player.id not in self._players:
                    raise KeyError(player.id)
                stored = player.model_copy()
                self._players[player.id] = stored
                return "updated", stored.model_copy()
            stored = self._insert_player_locked(player)
            return "created", stored.model_copy()

    def import_players(self, players: Iterable[Player]) -> int:
        with self._lock:
            count = 0
            for player in players:
                self._insert_player_locked(player)
                count += 1
            return count

    def delete_player(self, player_id: int) -> bool:
        with self._lock:
            removed = self._players.pop(player_id, None)
            self._remove_membership_locked(player_id)
            return removed is not None

    def _insert_player_locked(self, player: Player) -> Player:
        stored = player.model_copy(update={"id": self._next_player_id})
        self._players[stored.id] = stored
        self._next_player_id += 1
        return stored

    # Flights -----------------------------------------------------------

    def list_flights(self) -> List[Flight]:
        with self._lock:
            return [self._flight_view_locked(key) for key in sorted(self._flights)]

    def get_flight(self, flight_id: int) -> Optional[Flight]:
        with self._lock:
            if flight_id not in self._flights:
                return None
            return self._flight_view_locked(flight_id)

    def create_flight(self, name: str, starting_hole: int = 1) -> Flight:
        with self._lock:
            self._check_hole_locked(starting_hole)
            flight = Flight(
                id=self._next_flight_id,
                token=self._unique_token_locked(),
                name=name,
                starting_hole=starting_hole,
            )
            self._next_flight_id += 1
            self._flights[flight.id] = flight
            self._members[flight.id] = []
            _logger.info("created flight %s (%s)", flight.id, name)
            return self._flight_view_locked(flight.id)

    def update_flight(self, flight_id: int, name: str, starting_hole: int) -> Flight:
        with self._lock:
            flight = self._flights.get(flight_id)
            if flight is None:
                raise KeyError(flight_id)
            self._check_hole_locked(starting_hole)
            # Tokens are issued once and never change.
            self._flights[flight_id] = flight.model_copy(
                update={"name": name, "starting_hole": starting_hole}
            )
            return self._flight_view_locked(flight_id)

    def delete_flight(self, flight_id: int) -> None:
        with self._lock:
            if flight_id not in self._flights:
                raise KeyError(flight_id)
            del self._flights[flight_id]
            self._members.pop(flight_id, None)

    def assign(self, flight_id: int, player_id: int) -> None:
        with self._lock:
            if flight_id not in self._flights:
                raise KeyError(flight_id)
            if player_id not in self._players:
                raise KeyError(player_id)
            members = self._members[flight_id]
            if player_id in members:
                return
            if len(members) >= self._capacity:
                raise FlightFull("flight is full")
            self._remove_membership_locked(player_id)
            members.append(player_id)

    def unassign(self, player_id: int) -> bool:
        with self._lock:
            return self._remove_membership_locked(player_id)

    def random_assign(self) -> int:
        with self._lock:
            assigned = {pid for members in self._members.values() for pid in members}
            pool = [pid for pid in sorted(self._players) if pid not in assigned]
            self._rng.shuffle(pool)
            placed = 0
            for flight_id in sorted(self._flights):
                members = self._members[flight_id]
                while pool and len(members) < self._capacity:
                    members.append(pool.pop())
                    placed += 1
            if pool:
                _logger.warning(
                    "random assignment left %d players without a flight", len(pool)
                )
            return placed

    def _remove_membership_locked(self, player_id: int) -> bool:
        removed = False
        for members in self._members.values():
            if player_id in members:
                members.remove(player_id)
                removed = True
        return removed

    def _flight_view_locked(self, flight_id: int) -> Flight:
        flight = self._flights[flight_id]
        players = [
            self._players[pid].model_copy()
            for pid in self._members.get(flight_id, [])
            if pid in self._players
        ]
        return flight.model_copy(update={"players": players})

    def _unique_token_locked(self) -> str:
        taken = {flight.token for flight in self._flights.values()}
        while True:
            token = secrets.token_hex(8)
            if token not in taken:
                return token

    # Scores ------------------------------------------------------------

    def get_scores(self, player_id: int) -> Dict[int, int]:
        with self._lock:
            return {
                hole: strokes
                for (pid, hole), strokes in sorted(self._scores.items())
                if pid == player_id
            }

    def upsert_score(self, player_id: int, hole: int, strokes: int) -> Tuple[int, bool]:
        """Store a score and return ``(stored_strokes, capped)``."""

        with self._lock:
            if player_id not in self._players:
                raise KeyError(player_id)
            self._check_hole_locked(hole)
            capped = strokes > self._max_strokes
            stored = min(strokes, self._max_strokes)
            self._scores[(player_id, hole)] = stored
            return stored, capped

    def results(self) -> List[PlayerResult]:
        with self._lock:
            rows: List[PlayerResult] = []
            for player in self._players.values():
                strokes = [
                    value
                    for (pid, _hole), value in self._scores.items()
                    if pid == player.id
                ]
                gross = sum(strokes)
                rows.append(
                    PlayerResult(
                        id=player.id,
                        name=player.name,
                        surname=player.surname,
                        handicap=player.handicap,
                        gross=gross,
                        net=float(gross) - player.handicap,
                        holes_played=len(strokes),
                    )
                )
        rows.sort(key=lambda row: (row.holes_played == 0, row.net, row.id))
        return rows

    # Course ------------------------------------------------------------

    def get_course(self) -> List[CourseHole]:
        with self._lock:
            return [self._holes[key].model_copy() for key in sorted(self._holes)]

    def update_course(self, holes: Iterable[CourseHole]) -> int:
        with self._lock:
            updated = 0
            for hole in holes:
                if hole.hole_number not in self._holes:
                    continue
                self._holes[hole.hole_number] = hole.model_copy()
                updated += 1
            return updated

    @property
    def hole_count(self) -> int:
        return len(self._holes)

    def _check_hole_locked(self, hole: int) -> None:
        if hole not in self._holes:
            raise ValueError(f"hole {hole} is not on this course")


__all__ = ["FlightFull", "MemoryTournamentRepository"]
