"""Score-to-par classification used to colour the scorecard grid."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Mapping, Optional, Tuple


class ScoreCategory(str, Enum):
    UNSCORED = "unscored"
    EAGLE_OR_BETTER = "eagle-or-better"
    BIRDIE = "birdie"
    PAR = "par"
    BOGEY = "bogey"
    DOUBLE_BOGEY = "double-bogey"
    TRIPLE_OR_WORSE = "triple-or-worse"


PALETTE: Dict[ScoreCategory, str] = {
    ScoreCategory.UNSCORED: "#E6E6E6",
    ScoreCategory.EAGLE_OR_BETTER: "#F59391",
    ScoreCategory.BIRDIE: "#F5C5C4",
    ScoreCategory.PAR: "#FCF6A1",
    ScoreCategory.BOGEY: "#D3D1EB",
    ScoreCategory.DOUBLE_BOGEY: "#BBB0EB",
    ScoreCategory.TRIPLE_OR_WORSE: "#9A78DB",
}


def classify(score: Optional[int], par: int) -> ScoreCategory:
    if score is None:
        return ScoreCategory.UNSCORED
    diff = int(score) - int(par)
    if diff <= -2:
        return ScoreCategory.EAGLE_OR_BETTER
    if diff == -1:
        return ScoreCategory.BIRDIE
    if diff == 0:
        return ScoreCategory.PAR
    if diff == 1:
        return ScoreCategory.BOGEY
    if diff == 2:
        return ScoreCategory.DOUBLE_BOGEY
    return ScoreCategory.TRIPLE_OR_WORSE


def style_for(score: Optional[int], par: int) -> Dict[str, str]:
    return {"backgroundColor": PALETTE[classify(score, par)]}


def total_for(
    scores: Mapping[Tuple[int, int], int],
    player_id: int,
    start_hole: int,
    end_hole: int,
) -> int:
    """Sum recorded strokes over an inclusive hole range.

    Unscored holes count as 0, so a partial round yields a partial total.
    """

    return sum(
        scores.get((player_id, hole), 0) for hole in range(start_hole, end_hole + 1)
    )


__all__ = ["ScoreCategory", "PALETTE", "classify", "style_for", "total_for"]
