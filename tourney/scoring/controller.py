"""Hole picker workflow: gate, edit one hole for the whole flight, submit."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from tourney.config import get_settings
from tourney.errors import GatingViolation, InvalidTransition
from tourney.telemetry.events import record_picker_blocked, record_score_submit

from .session import FlightSession

_logger = logging.getLogger(__name__)


class PickerState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    WARNING = "warning"
    SUBMITTING = "submitting"


@dataclass
class SubmitOutcome:
    hole: int
    written: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


class ScoreEntryController:
    def __init__(self, session: FlightSession) -> None:
        self.session = session
        self.state = PickerState.CLOSED
        self.hole: Optional[int] = None
        self.warning: Optional[GatingViolation] = None
        self._working: Dict[int, int] = {}
        self._previous: Dict[int, Optional[int]] = {}

    @property
    def working_values(self) -> Dict[int, int]:
        return dict(self._working)

    @property
    def max_strokes(self) -> int:
        return get_settings().max_strokes

    def picker_options(self) -> List[int]:
        return list(range(1, self.max_strokes + 1))

    def is_hole_scored(self, hole: int) -> bool:
        return self.session.has_score(hole)

    def open_picker(self, hole: int) -> PickerState:
        if self.state is not PickerState.CLOSED:
            raise InvalidTransition(f"cannot open picker while {self.state.value}")
        if hole not in self.session.holes:
            raise ValueError(f"hole {hole} is not on this course")

        start_hole = self.session.start_hole
        if hole != start_hole and not self.session.has_score(start_hole):
            flight = self.session.flight
            self.warning = GatingViolation(hole, start_hole)
            self.state = PickerState.WARNING
            if flight is not None:
                record_picker_blocked(flight.id, hole=hole, start_hole=start_hole)
            return self.state

        par = self.session.par_for(hole)
        self._working = {}
        self._previous = {}
        for player in self.session.players:
            existing = self.session.get_score(player.id, hole)
            self._previous[player.id] = existing
            self._working[player.id] = existing if existing is not None else par
        self.hole = hole
        self.warning = None
        self.state = PickerState.OPEN
        return self.state

    def set_working_value(self, player_id: int, strokes: int) -> None:
        hole = self._require_open()
        if player_id not in self._working:
            raise KeyError(player_id)
        value = int(strokes)
        if value < 1 or value > self.max_strokes:
            raise ValueError(f"strokes must be between 1 and {self.max_strokes}")
        self._working[player_id] = value
        # Visible grid follows the picker before anything is written remotely.
        self.session.record_local(player_id, hole, value)

    def step(self, player_id: int, delta: int) -> int:
        self._require_open()
        current = self._working[player_id]
        value = min(self.max_strokes, max(1, current + int(delta)))
        self.set_working_value(player_id, value)
        return value

    async def submit(self) -> SubmitOutcome:
        hole = self._require_open()
        values = dict(self._working)
        for player_id, strokes in values.items():
            self.session.record_local(player_id, hole, strokes)

        client = self.session.client
        player_ids = list(values)
        start = time.perf_counter()
        # Locked until every write has settled.
        self.state = PickerState.SUBMITTING
        try:
            results = await asyncio.gather(
                *(
                    client.submit_score(player_id, hole, values[player_id])
                    for player_id in player_ids
                ),
                return_exceptions=True,
            )
        finally:
            self._reset()
        outcome = SubmitOutcome(hole=hole)
        for player_id, result in zip(player_ids, results):
            if isinstance(result, Exception):
                _logger.warning(
                    "score write failed for player %s hole %s: %s",
                    player_id,
                    hole,
                    result,
                )
                outcome.failed.append(player_id)
            elif isinstance(result, BaseException):
                raise result
            else:
                outcome.written.append(player_id)

        flight = self.session.flight
        if flight is not None:
            record_score_submit(
                flight.id,
                (time.perf_counter() - start) * 1000.0,
                hole=hole,
                written=outcome.written,
                failed=outcome.failed,
            )
        return outcome

    def cancel(self) -> None:
        if self.state is PickerState.CLOSED:
            raise InvalidTransition("picker is already closed")
        if self.state is PickerState.SUBMITTING:
            raise InvalidTransition("cannot cancel while scores are being submitted")
        if self.state is PickerState.OPEN and self.hole is not None:
            for player_id, previous in self._previous.items():
                self.session.restore_local(player_id, self.hole, previous)
        self._reset()

    def _require_open(self) -> int:
        if self.state is not PickerState.OPEN or self.hole is None:
            raise InvalidTransition(f"picker is {self.state.value}, not open")
        return self.hole

    def _reset(self) -> None:
        self.state = PickerState.CLOSED
        self.hole = None
        self.warning = None
        self._working = {}
        self._previous = {}


__all__ = ["PickerState", "SubmitOutcome", "ScoreEntryController"]
