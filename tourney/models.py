from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

_FEMALE_VALUES = {"f", "female", "w", "woman"}


class Player(BaseModel):
    id: int = 0
    name: str = ""
    surname: str = ""
    reg_num: str = ""
    handicap: float = 0.0
    gender: str = ""

    @property
    def is_female(self) -> bool:
        return self.gender.strip().lower() in _FEMALE_VALUES

    @property
    def initials(self) -> str:
        return (self.name[:1] + self.surname[:1]).upper()


class Flight(BaseModel):
    id: int
    token: str
    name: str
    starting_hole: int = 1
    players: List[Player] = Field(default_factory=list)

    def player_ids(self) -> List[int]:
        return [player.id for player in self.players]


class CourseHole(BaseModel):
    hole_number: int
    par: int
    length_yellow: int = 0
    length_red: int = 0

    def length_for(self, player: Player) -> int:
        """Distance from the tee matching the player's gender category."""

        return self.length_red if player.is_female else self.length_yellow


class ScoreEntry(BaseModel):
    player_id: int
    hole_number: int
    strokes: int = Field(..., ge=1)


class PlayerResult(BaseModel):
    id: int
    name: str
    surname: str
    handicap: float = 0.0
    gross: int = 0
    net: float = 0.0
    holes_played: int = 0


__all__ = ["Player", "Flight", "CourseHole", "ScoreEntry", "PlayerResult"]
