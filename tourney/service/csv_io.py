"""CSV formats for bulk player import and course import/export."""

from __future__ import annotations

import csv
import io
from typing import Iterable, List

from tourney.models import CourseHole, Player

COURSE_HEADER = ["Hole", "Par", "LengthYellow", "LengthRed"]


def _rows(text: str) -> List[List[str]]:
    reader = csv.reader(io.StringIO(text))
    return [[cell.strip() for cell in row] for row in reader if row]


def _to_int(value: str) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_float(value: str) -> float:
    try:
        return float(value.replace(",", "."))
    except (AttributeError, ValueError):
        return 0.0


def parse_player_rows(text: str) -> List[Player]:
    """Parse ``name, surname, reg_num[, handicap[, gender]]`` rows.

    A first row whose first cell reads "name" is treated as a header. Rows
    with fewer than three columns are skipped and an unreadable handicap
    becomes 0.
    """

    players: List[Player] = []
    for index, row in enumerate(_rows(text)):
        if index == 0 and row[0].lower() == "name":
            continue
        if len(row) < 3:
            continue
        players.append(
            Player(
                name=row[0],
                surname=row[1],
                reg_num=row[2],
                handicap=_to_float(row[3]) if len(row) > 3 else 0.0,
                gender=row[4] if len(row) > 4 else "",
            )
        )
    return players


def parse_course_rows(text: str, hole_count: int) -> List[CourseHole]:
    holes: List[CourseHole] = []
    for index, row in enumerate(_rows(text)):
        # First row is always the header.
        if index == 0 or len(row) < 3:
            continue
        hole = _to_int(row[0])
        par = _to_int(row[1])
        if hole is None or par is None or not 1 <= hole <= hole_count:
            continue
        length_yellow = _to_int(row[2]) or 0
        length_red = length_yellow
        if len(row) > 3:
            length_red = _to_int(row[3]) or 0
        holes.append(
            CourseHole(
                hole_number=hole,
                par=par,
                length_yellow=length_yellow,
                length_red=length_red,
            )
        )
    return holes


def export_course_csv(holes: Iterable[CourseHole]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(COURSE_HEADER)
    for hole in holes:
        writer.writerow(
            [hole.hole_number, hole.par, hole.length_yellow, hole.length_red]
        )
    return buffer.getvalue()


__all__ = [
    "COURSE_HEADER",
    "export_course_csv",
    "parse_course_rows",
    "parse_player_rows",
]
