"""Error taxonomy shared by the scoring and roster workflows."""

from __future__ import annotations

from typing import Any, Sequence


class TournamentError(Exception):
    """Base class for every error raised by the tournament core."""


class FlightNotFound(TournamentError):
    """No flight matches the requested token."""

    def __init__(self, token: str) -> None:
        super().__init__(f"flight not found for token {token!r}")
        self.token = token


class RecordNotFound(TournamentError):
    """The remote service answered 404 for a record lookup or mutation."""


class PlayerValidationError(TournamentError, ValueError):
    """Required player fields are missing; the save is not submitted."""

    def __init__(self, fields: Sequence[str]) -> None:
        self.fields = list(fields)
        super().__init__(f"missing required player fields: {', '.join(self.fields)}")


class GatingViolation(TournamentError):
    """The starting hole has not been scored yet, so another hole cannot open."""

    def __init__(self, hole: int, start_hole: int) -> None:
        self.hole = hole
        self.start_hole = start_hole
        super().__init__(
            f"Scoring must begin on hole {start_hole}. "
            f"Enter at least one score for hole {start_hole} before hole {hole}."
        )


class TransientNetworkFailure(TournamentError):
    """A request failed in transport or with a server-side error."""


class RequestRejected(TournamentError):
    """The remote service refused a request (4xx other than 404)."""

    def __init__(self, status_code: int, detail: Any = None) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"request rejected ({status_code}): {detail}")


class InvalidTransition(TournamentError, RuntimeError):
    """A picker operation was attempted from a state that does not allow it."""


__all__ = [
    "TournamentError",
    "FlightNotFound",
    "RecordNotFound",
    "PlayerValidationError",
    "GatingViolation",
    "TransientNetworkFailure",
    "RequestRejected",
    "InvalidTransition",
]
