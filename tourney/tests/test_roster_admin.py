from __future__ import annotations

import asyncio

import pytest

from tourney.errors import PlayerValidationError, RequestRejected
from tourney.models import CourseHole, Player
from tourney.roster import RosterAdmin, RosterAssignment, validate_player


def _admin_run(make_client, body):
    async def scenario():
        async with make_client() as client:
            roster = RosterAssignment(client)
            return await body(RosterAdmin(roster), roster)

    return asyncio.run(scenario())


def test_validate_player_names_missing_fields():
    with pytest.raises(PlayerValidationError) as excinfo:
        validate_player(Player(name=" ", surname=""))
    assert excinfo.value.fields == ["name", "surname"]
    validate_player(Player(name="Ann", surname="Lee"))


def test_invalid_player_is_never_sent(repo, make_client):
    async def body(admin, roster):
        with pytest.raises(PlayerValidationError):
            await admin.save_player(Player(name="Ann"))

    _admin_run(make_client, body)
    assert repo.list_players() == []


def test_save_and_delete_player_refresh_roster(repo, make_client, telemetry_sink):
    async def body(admin, roster):
        await admin.save_player(Player(name="Ann", surname="Lee", handicap=7.2))
        assert [p.name for p in roster.players] == ["Ann"]
        stored = roster.players[0]

        await admin.save_player(stored.model_copy(update={"handicap": 3.0}))
        assert roster.players[0].handicap == 3.0

        assert await admin.delete_player(stored.id, lambda _msg: False) is False
        assert len(roster.players) == 1
        assert await admin.delete_player(stored.id, lambda _msg: True) is True
        assert roster.players == []

    _admin_run(make_client, body)
    actions = [p["action"] for name, p in telemetry_sink if name == "roster.mutation"]
    assert actions == ["player.create", "player.update", "player.delete"]


def test_flight_management(repo, make_client):
    async def body(admin, roster):
        assert await admin.create_flight("   ") is None
        flight = await admin.create_flight("Dawn", starting_hole=10)
        assert [f.id for f in roster.flights] == [flight.id]

        await admin.update_flight(flight.id, "Dawn Tee", 1)
        assert roster.flights[0].name == "Dawn Tee"
        assert roster.flights[0].token == flight.token

        with pytest.raises(RequestRejected):
            await admin.create_flight("Nowhere", starting_hole=30)

        assert await admin.delete_flight(flight.id, lambda _msg: True) is True
        assert roster.flights == []

    _admin_run(make_client, body)


def test_import_players_and_course_round_trip(repo, make_client):
    async def body(admin, roster):
        imported = await admin.import_players(
            "players.csv", b"Ann,Lee,R1,4.2,F\nBob,Ray,R2\n"
        )
        assert imported == 2
        assert len(roster.unassigned) == 2

        await admin.save_course(
            [CourseHole(hole_number=4, par=3, length_yellow=160, length_red=140)]
        )
        holes = {hole.hole_number: hole for hole in await admin.load_course()}
        assert holes[4].par == 3

        exported = await admin.export_course()
        updated = await admin.import_course("course.csv", exported.encode())
        return updated

    assert _admin_run(make_client, body) == 18
