"""Telemetry helpers for scoring and roster instrumentation."""

from .events import (
    record_flight_resolved,
    record_picker_blocked,
    record_roster_mutation,
    record_score_submit,
    set_scoring_telemetry_emitter,
)

__all__ = [
    "set_scoring_telemetry_emitter",
    "record_flight_resolved",
    "record_picker_blocked",
    "record_score_submit",
    "record_roster_mutation",
]
