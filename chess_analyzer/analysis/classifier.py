"""
Move quality classification from an engine score.

Score bands, checked from the most severe down (lower bound inclusive):
    score >= 300        Blunder
    100 <= score < 300  Mistake
    50 <= score < 100   Inaccuracy
    score < 50          Good move

The score is taken as the engine reports it: larger positive values are
treated as worse, with no adjustment for the side to move.
"""

import enum
from typing import Optional


class MoveCategory(enum.Enum):
    GOOD_MOVE = "Good move"
    INACCURACY = "Inaccuracy"
    MISTAKE = "Mistake"
    BLUNDER = "Blunder"

    def __str__(self) -> str:
        return self.value


BLUNDER_THRESHOLD = 300
MISTAKE_THRESHOLD = 100
INACCURACY_THRESHOLD = 50

SCORE_BANDS = (
    (BLUNDER_THRESHOLD, MoveCategory.BLUNDER),
    (MISTAKE_THRESHOLD, MoveCategory.MISTAKE),
    (INACCURACY_THRESHOLD, MoveCategory.INACCURACY),
)


def classify(score: int) -> MoveCategory:
    """
    Map a centipawn score to a move category.

    Args:
        score: Signed engine score

    Returns:
        First band whose lower bound the score reaches, else GOOD_MOVE
    """
    for threshold, category in SCORE_BANDS:
        if score >= threshold:
            return category
    return MoveCategory.GOOD_MOVE


def classify_optional(score: Optional[int]) -> MoveCategory:
    """Classify a score that may be missing; missing counts as a good move."""
    if score is None:
        return MoveCategory.GOOD_MOVE
    return classify(score)
