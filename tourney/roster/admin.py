"""Organizer operations around the roster: players, flights and course."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from tourney.errors import PlayerValidationError
from tourney.models import CourseHole, Flight, Player
from tourney.telemetry.events import record_roster_mutation

from .assignment import Confirm, RosterAssignment

_logger = logging.getLogger(__name__)

DELETE_PLAYER_PROMPT = "Delete this player? Recorded scores stay on file."
DELETE_FLIGHT_PROMPT = (
    "Delete this flight? Its players will return to the unassigned list."
)


def validate_player(player: Player) -> None:
    missing = [
        field for field in ("name", "surname") if not getattr(player, field).strip()
    ]
    if missing:
        raise PlayerValidationError(missing)


class RosterAdmin:
    """Mutating organizer actions; each one reloads the roster afterwards."""

    def __init__(self, roster: RosterAssignment) -> None:
        self.roster = roster
        self._client = roster.client

    async def save_player(self, player: Player) -> None:
        validate_player(player)
        ok = False
        try:
            await self._client.save_player(player)
            ok = True
        finally:
            await self.roster.refresh_after(ok)
        record_roster_mutation(
            "player.update" if player.id > 0 else "player.create",
            player_id=player.id or None,
        )

    async def delete_player(self, player_id: int, confirm: Confirm) -> bool:
        if not confirm(DELETE_PLAYER_PROMPT):
            return False
        ok = False
        try:
            await self._client.delete_player(player_id)
            ok = True
        finally:
            await self.roster.refresh_after(ok)
        record_roster_mutation("player.delete", player_id=player_id)
        return True

    async def import_players(self, filename: str, content: bytes) -> int:
        ok = False
        try:
            imported = await self._client.import_players(filename, content)
            ok = True
        finally:
            await self.roster.refresh_after(ok)
        _logger.info("imported %d players from %s", imported, filename)
        return imported

    async def create_flight(
        self, name: str, starting_hole: int = 1
    ) -> Optional[Flight]:
        name = (name or "").strip()
        if not name:
            return None
        ok = False
        try:
            flight = await self._client.create_flight(name, starting_hole or 1)
            ok = True
        finally:
            await self.roster.refresh_after(ok)
        record_roster_mutation("flight.create", flight_id=flight.id)
        return flight

    async def update_flight(
        self, flight_id: int, name: str, starting_hole: int
    ) -> None:
        ok = False
        try:
            await self._client.update_flight(flight_id, name, starting_hole)
            ok = True
        finally:
            await self.roster.refresh_after(ok)
        record_roster_mutation("flight.update", flight_id=flight_id)

    async def delete_flight(self, flight_id: int, confirm: Confirm) -> bool:
        if not confirm(DELETE_FLIGHT_PROMPT):
            return False
        ok = False
        try:
            await self._client.delete_flight(flight_id)
            ok = True
        finally:
            await self.roster.refresh_after(ok)
        record_roster_mutation("flight.delete", flight_id=flight_id)
        return True

    async def load_course(self) -> List[CourseHole]:
        return await self._client.get_course()

    async def save_course(self, holes: Iterable[CourseHole]) -> None:
        await self._client.save_course(holes)

    async def import_course(self, filename: str, content: bytes) -> int:
        updated = await self._client.import_course(filename, content)
        _logger.info("updated %d course holes from %s", updated, filename)
        return updated

    async def export_course(self) -> str:
        return await self._client.export_course()


__all__ = [
    "DELETE_FLIGHT_PROMPT",
    "DELETE_PLAYER_PROMPT",
    "RosterAdmin",
    "validate_player",
]
