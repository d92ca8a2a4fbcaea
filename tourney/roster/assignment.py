from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional, Set

from tourney.client import TournamentClient
from tourney.errors import TournamentError
from tourney.models import Flight, Player
from tourney.telemetry.events import record_roster_mutation

_logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]

RANDOM_ASSIGN_PROMPT = (
    "Randomly assign all unassigned players to flights? "
    "Manual arrangements of open slots will be filled."
)


def compute_unassigned(
    players: Iterable[Player], flights: Iterable[Flight]
) -> List[Player]:
    assigned: Set[int] = set()
    for flight in flights:
        assigned.update(flight.player_ids())
    return [player for player in players if player.id not in assigned]


def find_duplicate_members(flights: Iterable[Flight]) -> Set[int]:
    seen: Set[int] = set()
    duplicates: Set[int] = set()
    for flight in flights:
        for player_id in flight.player_ids():
            if player_id in seen:
                duplicates.add(player_id)
            seen.add(player_id)
    return duplicates


class RosterAssignment:
    """Organizer view of who plays in which flight.

    Membership is never kept locally between calls: every mutation is
    followed by a refresh from the service, whether the mutation succeeded
    or not.
    """

    def __init__(self, client: TournamentClient) -> None:
        self._client = client
        self.players: List[Player] = []
        self.flights: List[Flight] = []

    @property
    def client(self) -> TournamentClient:
        return self._client

    @property
    def unassigned(self) -> List[Player]:
        return compute_unassigned(self.players, self.flights)

    def flight_of(self, player_id: int) -> Optional[Flight]:
        for flight in self.flights:
            if player_id in flight.player_ids():
                return flight
        return None

    def flight_by_id(self, flight_id: int) -> Optional[Flight]:
        for flight in self.flights:
            if flight.id == flight_id:
                return flight
        return None

    def membership(self) -> Dict[int, int]:
        return {
            player_id: flight.id
            for flight in self.flights
            for player_id in flight.player_ids()
        }

    async def refresh(self) -> None:
        self.flights = await self._client.list_flights()
        self.players = await self._client.list_players()
        duplicates = find_duplicate_members(self.flights)
        if duplicates:
            _logger.error(
                "players assigned to more than one flight: %s", sorted(duplicates)
            )

    async def refresh_after(self, ok: bool) -> None:
        """Reload after a mutation without masking the mutation's own error."""

        if ok:
            await self.refresh()
            return
        try:
            await self.refresh()
        except TournamentError:
            _logger.exception("roster reload after a failed mutation also failed")

    async def assign(self, flight_id: int, player_id: int) -> None:
        ok = False
        try:
            await self._client.assign_player(flight_id, player_id)
            ok = True
        finally:
            record_roster_mutation(
                "assign", player_id=player_id, flight_id=flight_id, ok=ok
            )
            if not ok:
                _logger.warning(
                    "assign player %s to flight %s failed; reloading roster",
                    player_id,
                    flight_id,
                )
            await self.refresh_after(ok)

    async def unassign(self, player_id: int) -> None:
        ok = False
        try:
            await self._client.unassign_player(player_id)
            ok = True
        finally:
            record_roster_mutation("unassign", player_id=player_id, ok=ok)
            if not ok:
                _logger.warning(
                    "unassign player %s failed; reloading roster", player_id
                )
            await self.refresh_after(ok)

    async def move(self, player_id: int, flight_id: Optional[int]) -> None:
        """Apply a drag relocation; ``None`` is the unassigned pool."""

        if flight_id is None:
            await self.unassign(player_id)
        else:
            await self.assign(flight_id, player_id)

    async def random_assign(self, confirm: Confirm) -> bool:
        if not confirm(RANDOM_ASSIGN_PROMPT):
            return False
        ok = False
        try:
            placed = await self._client.random_assign()
            ok = True
            _logger.info("random assignment placed %d players", placed)
        finally:
            record_roster_mutation("random_assign", ok=ok)
            await self.refresh_after(ok)
        return True


__all__ = [
    "Confirm",
    "RANDOM_ASSIGN_PROMPT",
    "RosterAssignment",
    "compute_unassigned",
    "find_duplicate_members",
]
