from __future__ import annotations

import asyncio
import json
from typing import List

import httpx
import pytest

from tourney.client import TournamentClient
from tourney.errors import RequestRejected, TransientNetworkFailure
from tourney.models import Flight, Player
from tourney.roster.assignment import (
    RosterAssignment,
    compute_unassigned,
    find_duplicate_members,
)


def _seed_players(repo, count: int) -> List[Player]:
    players = []
    for index in range(count):
        _, stored = repo.save_player(
            Player(name=f"P{index}", surname=f"S{index}", handicap=float(index))
        )
        players.append(stored)
    return players


def _assert_exclusive(roster: RosterAssignment) -> None:
    assert find_duplicate_members(roster.flights) == set()


def test_compute_unassigned_is_set_difference():
    players = [Player(id=i, name=f"n{i}", surname="x") for i in range(1, 6)]
    flights = [
        Flight(id=1, token="a", name="A", players=[players[0], players[2]]),
        Flight(id=2, token="b", name="B", players=[players[4]]),
    ]
    unassigned = compute_unassigned(players, flights)
    assert [p.id for p in unassigned] == [2, 4]
    assert compute_unassigned(players, []) == players


def test_find_duplicate_members_reports_shared_players():
    shared = Player(id=3, name="a", surname="b")
    flights = [
        Flight(id=1, token="a", name="A", players=[shared]),
        Flight(id=2, token="b", name="B", players=[shared, Player(id=4)]),
    ]
    assert find_duplicate_members(flights) == {3}


def test_assign_and_unassign_round_trip(repo, make_client):
    players = _seed_players(repo, 3)
    first = repo.create_flight("Morning")
    second = repo.create_flight("Afternoon", starting_hole=10)

    async def scenario():
        async with make_client() as client:
            roster = RosterAssignment(client)
            await roster.refresh()
            assert len(roster.unassigned) == 3

            await roster.assign(first.id, players[0].id)
            assert players[0].id not in {p.id for p in roster.unassigned}
            assert roster.flight_of(players[0].id).id == first.id
            _assert_exclusive(roster)

            # Dragging into another flight moves, never duplicates.
            await roster.move(players[0].id, second.id)
            assert roster.flight_of(players[0].id).id == second.id
            assert roster.flight_by_id(first.id).players == []
            _assert_exclusive(roster)

            await roster.move(players[0].id, None)
            assert players[0].id in {p.id for p in roster.unassigned}

            await roster.unassign(players[0].id)
            assert len(roster.unassigned) == 3
            assert roster.membership() == {}

    asyncio.run(scenario())


def test_full_flight_rejects_and_roster_reloads(repo, make_client):
    players = _seed_players(repo, 5)
    flight = repo.create_flight("Full")
    for player in players[:4]:
        repo.assign(flight.id, player.id)

    async def scenario():
        async with make_client() as client:
            roster = RosterAssignment(client)
            with pytest.raises(RequestRejected) as excinfo:
                await roster.assign(flight.id, players[4].id)
            assert excinfo.value.status_code == 400
            # Refresh ran even though the mutation failed.
            assert [p.id for p in roster.unassigned] == [players[4].id]
            assert len(roster.flight_by_id(flight.id).players) == 4

    asyncio.run(scenario())


def test_random_assign_requires_confirmation():
    calls: List[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(f"{request.method} {request.url.path}")
        return httpx.Response(200, json=[])

    async def scenario():
        async with TournamentClient(
            "http://svc", transport=httpx.MockTransport(handler)
        ) as client:
            roster = RosterAssignment(client)
            prompts: List[str] = []

            def decline(message: str) -> bool:
                prompts.append(message)
                return False

            assert await roster.random_assign(decline) is False
            assert prompts
            assert calls == []

    asyncio.run(scenario())


def test_random_assign_fills_open_slots(repo, make_client):
    _seed_players(repo, 6)
    first = repo.create_flight("One")
    repo.create_flight("Two")
    repo.assign(first.id, 1)

    async def scenario():
        async with make_client() as client:
            roster = RosterAssignment(client)
            assert await roster.random_assign(lambda _msg: True) is True
            assert roster.unassigned == []
            sizes = sorted(len(f.players) for f in roster.flights)
            assert sizes == [2, 4]
            assert 1 in roster.flight_by_id(first.id).player_ids()
            _assert_exclusive(roster)

    asyncio.run(scenario())


def test_failed_assign_still_reconciles_from_server():
    state = {
        "players": [{"id": 1, "name": "Ann", "surname": "Lee"}],
        "flights": [{"id": 9, "token": "t9", "name": "Nine", "players": []}],
    }
    calls: List[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(f"{request.method} {request.url.path}")
        if request.url.path == "/api/flights/assign":
            assert json.loads(request.content) == {"flight_id": 9, "player_id": 1}
            return httpx.Response(503)
        if request.url.path == "/api/flights":
            return httpx.Response(200, json=state["flights"])
        return httpx.Response(200, json=state["players"])

    async def scenario():
        async with TournamentClient(
            "http://svc", transport=httpx.MockTransport(handler)
        ) as client:
            roster = RosterAssignment(client)
            with pytest.raises(TransientNetworkFailure):
                await roster.assign(9, 1)
            assert [p.id for p in roster.unassigned] == [1]

    asyncio.run(scenario())
    assert calls == [
        "POST /api/flights/assign",
        "GET /api/flights",
        "GET /api/players",
    ]


def test_unassign_of_unassigned_player_is_noop(repo, make_client):
    players = _seed_players(repo, 1)

    async def scenario():
        async with make_client() as client:
            roster = RosterAssignment(client)
            await roster.unassign(players[0].id)
            await roster.unassign(players[0].id)
            assert [p.id for p in roster.unassigned] == [players[0].id]

    asyncio.run(scenario())


def test_rejected_assign_survives_failed_reload(caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/flights/assign":
            return httpx.Response(400, json={"detail": "flight is full"})
        return httpx.Response(503)

    async def scenario():
        async with TournamentClient(
            "http://svc", transport=httpx.MockTransport(handler)
        ) as client:
            roster = RosterAssignment(client)
            with pytest.raises(RequestRejected) as excinfo:
                await roster.assign(1, 2)
            return excinfo.value

    with caplog.at_level("ERROR", logger="tourney.roster.assignment"):
        error = asyncio.run(scenario())
    assert error.detail == "flight is full"
    assert "reload after a failed mutation" in caplog.text
