from __future__ import annotations

import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from tourney.models import CourseHole, Flight, Player, PlayerResult

from .csv_io import export_course_csv, parse_course_rows, parse_player_rows
from .metrics import observe_roster_change, observe_score_write
from .store import FlightFull, MemoryTournamentRepository

_logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["tournament"])

_REPOSITORY = MemoryTournamentRepository()


def get_repository() -> MemoryTournamentRepository:
    return _REPOSITORY


class IdBody(BaseModel):
    id: int


class FlightCreateIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    starting_hole: int = 0


class FlightUpdateIn(BaseModel):
    id: int
    name: str = Field(..., min_length=1, max_length=120)
    starting_hole: int = 1


class AssignIn(BaseModel):
    flight_id: int
    player_id: int


class UnassignIn(BaseModel):
    player_id: int


class ScoreIn(BaseModel):
    player_id: int
    hole_number: int
    strokes: int = Field(..., ge=1)


async def _read_upload(file: UploadFile) -> str:
    try:
        content = await file.read()
    finally:
        await file.close()
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="file must be UTF-8 CSV"
        ) from None


# Players -----------------------------------------------------------------


@router.get("/players", response_model=List[Player])
def list_players(repo: MemoryTournamentRepository = Depends(get_repository)):
    return repo.list_players()


@router.post("/players", response_model=Player)
def save_player(
    player: Player, repo: MemoryTournamentRepository = Depends(get_repository)
):
    if not player.name.strip() or not player.surname.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="name and surname are required",
        )
    try:
        status_label, stored = repo.save_player(player)
    except KeyError:
        raise HTTPException(status_code=404, detail="player_not_found") from None
    if status_label == "created":
        return JSONResponse(
            status_code=status.HTTP_201_CREATED, content=stored.model_dump()
        )
    return stored


@router.post("/players/delete")
def delete_player(
    body: IdBody, repo: MemoryTournamentRepository = Depends(get_repository)
):
    repo.delete_player(body.id)
    return {"status": "ok"}


@router.post("/players/import")
async def import_players(
    file: UploadFile = File(...),
    repo: MemoryTournamentRepository = Depends(get_repository),
):
    text = await _read_upload(file)
    imported = repo.import_players(parse_player_rows(text))
    _logger.info("player import: %d rows stored", imported)
    return {"imported": imported}


# Flights -----------------------------------------------------------------


@router.get("/flights", response_model=List[Flight])
def list_flights(repo: MemoryTournamentRepository = Depends(get_repository)):
    return repo.list_flights()


@router.post("/flights", response_model=Flight, status_code=status.HTTP_201_CREATED)
def create_flight(
    body: FlightCreateIn, repo: MemoryTournamentRepository = Depends(get_repository)
):
    try:
        return repo.create_flight(body.name.strip(), body.starting_hole or 1)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.delete("/flights")
def delete_flight(
    body: IdBody, repo: MemoryTournamentRepository = Depends(get_repository)
):
    try:
        repo.delete_flight(body.id)
    except KeyError:
        raise HTTPException(status_code=404, detail="flight_not_found") from None
    observe_roster_change("flight_delete")
    return {"status": "ok"}


@router.post("/flights/update", response_model=Flight)
def update_flight(
    body: FlightUpdateIn, repo: MemoryTournamentRepository = Depends(get_repository)
):
    try:
        return repo.update_flight(body.id, body.name.strip(), body.starting_hole)
    except KeyError:
        raise HTTPException(status_code=404, detail="flight_not_found") from None
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post("/flights/assign")
def assign_player(
    body: AssignIn, repo: MemoryTournamentRepository = Depends(get_repository)
):
    try:
        repo.assign(body.flight_id, body.player_id)
    except KeyError:
        raise HTTPException(
            status_code=404, detail="flight_or_player_not_found"
        ) from None
    except FlightFull as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    observe_roster_change("assign")
    return {"status": "ok"}


@router.post("/flights/unassign")
def unassign_player(
    body: UnassignIn, repo: MemoryTournamentRepository = Depends(get_repository)
):
    if repo.unassign(body.player_id):
        observe_roster_change("unassign")
    return {"status": "ok"}


@router.post("/flights/random-assign")
def random_assign(repo: MemoryTournamentRepository = Depends(get_repository)):
    placed = repo.random_assign()
    observe_roster_change("random_assign", placed)
    _logger.info("random assignment placed %d players", placed)
    return {"assigned": placed}


# Scores ------------------------------------------------------------------


@router.get("/scores", response_model=Dict[str, int])
def get_scores(
    player_id: int = Query(...),
    repo: MemoryTournamentRepository = Depends(get_repository),
):
    return {str(hole): strokes for hole, strokes in repo.get_scores(player_id).items()}


@router.post("/scores")
def submit_score(
    body: ScoreIn, repo: MemoryTournamentRepository = Depends(get_repository)
):
    try:
        stored, capped = repo.upsert_score(
            body.player_id, body.hole_number, body.strokes
        )
    except KeyError:
        raise HTTPException(status_code=404, detail="player_not_found") from None
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    observe_score_write(capped)
    return {"status": "ok", "strokes": stored}


@router.get("/results", response_model=List[PlayerResult])
def results(repo: MemoryTournamentRepository = Depends(get_repository)):
    return repo.results()


# Course ------------------------------------------------------------------


@router.get("/course", response_model=List[CourseHole])
def get_course(repo: MemoryTournamentRepository = Depends(get_repository)):
    return repo.get_course()


@router.post("/course")
def save_course(
    holes: List[CourseHole], repo: MemoryTournamentRepository = Depends(get_repository)
):
    return {"updated": repo.update_course(holes)}


@router.post("/course/import")
async def import_course(
    file: UploadFile = File(...),
    repo: MemoryTournamentRepository = Depends(get_repository),
):
    text = await _read_upload(file)
    holes = parse_course_rows(text, repo.hole_count)
    return {"updated": repo.update_course(holes)}


@router.get("/course/export")
def export_course(repo: MemoryTournamentRepository = Depends(get_repository)):
    return Response(
        content=export_course_csv(repo.get_course()),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment;filename=course_config.csv"},
    )


__all__ = ["router", "get_repository"]
