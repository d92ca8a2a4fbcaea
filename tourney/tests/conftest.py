"""Shared pytest fixtures for tournament tests."""

from __future__ import annotations

import random
from typing import Callable, List, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

from tourney.client import TournamentClient
from tourney.config import reset_settings_cache
from tourney.service.app import app
from tourney.service.routes import get_repository
from tourney.service.store import MemoryTournamentRepository
from tourney.telemetry import events as telemetry_events


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def repo() -> MemoryTournamentRepository:
    repository = MemoryTournamentRepository(rng=random.Random(7))
    app.dependency_overrides[get_repository] = lambda: repository
    yield repository
    app.dependency_overrides.pop(get_repository, None)


@pytest.fixture
def api(repo) -> TestClient:
    return TestClient(app)


@pytest.fixture
def make_client(repo) -> Callable[[], TournamentClient]:
    """Build a TournamentClient wired to the in-process reference service.

    Call it inside the coroutine under test so the underlying httpx client
    belongs to the running event loop.
    """

    def _factory() -> TournamentClient:
        return TournamentClient(
            "http://testserver", transport=httpx.ASGITransport(app=app)
        )

    return _factory


@pytest.fixture
def telemetry_sink():
    captured: List[Tuple[str, dict]] = []

    def _emit(name: str, payload):
        captured.append((name, dict(payload)))

    telemetry_events.set_scoring_telemetry_emitter(_emit)
    yield captured
    telemetry_events.set_scoring_telemetry_emitter(None)
