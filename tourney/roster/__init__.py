"""Flight roster assignment and organizer operations."""

from .admin import RosterAdmin, validate_player
from .assignment import RosterAssignment, compute_unassigned, find_duplicate_members

__all__ = [
    "RosterAdmin",
    "RosterAssignment",
    "compute_unassigned",
    "find_duplicate_members",
    "validate_player",
]
