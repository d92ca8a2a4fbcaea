"""Telemetry helpers for live scoring and roster instrumentation."""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Iterable, Mapping, MutableMapping, Optional

ScoringTelemetryEmitter = Callable[[str, Mapping[str, object]], None]

_emitter: Optional[ScoringTelemetryEmitter] = None
_logger = logging.getLogger("tourney.telemetry.events")


def set_scoring_telemetry_emitter(candidate: ScoringTelemetryEmitter | None) -> None:
    """Register a telemetry emitter used for scoring instrumentation."""

    global _emitter
    _emitter = candidate if callable(candidate) else None


def _safe_emit(event: str, payload: MutableMapping[str, object]) -> None:
    if not _emitter:
        _logger.debug("telemetry emitter not configured for event %s", event)
        return
    try:
        _emitter(event, dict(payload))
    except Exception:  # pragma: no cover - logging only
        _logger.exception("failed to emit telemetry event %s", event)


def record_flight_resolved(token: str, *, flight_id: int | None) -> None:
    payload: Dict[str, object] = {
        "token": token,
        "found": flight_id is not None,
        "ts": _now_ms(),
    }
    if flight_id is not None:
        payload["flightId"] = int(flight_id)
    _safe_emit("flight.resolve", payload)


def record_picker_blocked(flight_id: int, *, hole: int, start_hole: int) -> None:
    payload: Dict[str, object] = {
        "flightId": int(flight_id),
        "hole": int(hole),
        "startHole": int(start_hole),
        "ts": _now_ms(),
    }
    _safe_emit("picker.blocked", payload)


def record_score_submit(
    flight_id: int,
    duration_ms: float,
    *,
    hole: int,
    written: Iterable[int],
    failed: Iterable[int] = (),
) -> None:
    failed_ids = sorted(int(player_id) for player_id in failed)
    payload: Dict[str, object] = {
        "flightId": int(flight_id),
        "hole": int(hole),
        "durationMs": int(max(0, round(duration_ms))),
        "written": len(list(written)),
        "status": "partial" if failed_ids else "ok",
        "ts": _now_ms(),
    }
    if failed_ids:
        payload["failedPlayerIds"] = failed_ids
    _safe_emit("score.submit", payload)


def record_roster_mutation(
    action: str,
    *,
    player_id: int | None = None,
    flight_id: int | None = None,
    ok: bool = True,
) -> None:
    payload: Dict[str, object] = {"action": action, "ok": bool(ok), "ts": _now_ms()}
    if player_id is not None:
        payload["playerId"] = int(player_id)
    if flight_id is not None:
        payload["flightId"] = int(flight_id)
    _safe_emit("roster.mutation", payload)


def _now_ms() -> int:
    return int(time.time() * 1000)


__all__ = [
    "ScoringTelemetryEmitter",
    "set_scoring_telemetry_emitter",
    "record_flight_resolved",
    "record_picker_blocked",
    "record_score_submit",
    "record_roster_mutation",
]
