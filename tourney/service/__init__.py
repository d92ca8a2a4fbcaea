"""Reference tournament service backed by an in-memory repository."""

from .app import app, create_app
from .routes import get_repository
from .store import FlightFull, MemoryTournamentRepository

__all__ = [
    "app",
    "create_app",
    "get_repository",
    "FlightFull",
    "MemoryTournamentRepository",
]
