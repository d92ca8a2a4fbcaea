"""Live scoring: flight sessions, the hole picker and score styling."""

from .controller import PickerState, ScoreEntryController, SubmitOutcome
from .session import FlightSession
from .style import PALETTE, ScoreCategory, classify, style_for, total_for

__all__ = [
    "FlightSession",
    "ScoreEntryController",
    "PickerState",
    "SubmitOutcome",
    "ScoreCategory",
    "PALETTE",
    "classify",
    "style_for",
    "total_for",
]
