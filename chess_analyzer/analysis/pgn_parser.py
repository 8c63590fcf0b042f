"""
Move extraction from game records.

This is a heuristic filter, not a PGN grammar: the record is split on
whitespace and every token starting with a from-square and a to-square
(e.g. "e2e4", "e7e8q", "g1f3+") is kept. Move numbers, result codes,
header tags and SAN moves such as "Nf3" do not match and are dropped.
Nothing is validated against a board.
"""

import re
from typing import Iterator, List

MOVE_PATTERN = re.compile(r"[a-h][1-8][a-h][1-8]")


def is_move_token(token: str) -> bool:
    """Check if a token starts with coordinate notation."""
    return MOVE_PATTERN.match(token) is not None


def iter_moves(record: str) -> Iterator[str]:
    """
    Yield move tokens from a game record, left to right.

    Args:
        record: Full game record (tags and movetext)

    Yields:
        Tokens matching the coordinate pattern, unchanged
    """
    for token in record.split():
        if is_move_token(token):
            yield token


class MoveSequence:
    """
    Lazy, restartable sequence of moves extracted from one record.

    Every iteration rescans the record, so the sequence can be walked any
    number of times without holding a list of moves.
    """

    def __init__(self, record: str):
        self.record = record

    def __iter__(self) -> Iterator[str]:
        return iter_moves(self.record)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def to_list(self) -> List[str]:
        return list(self)

    def __eq__(self, other) -> bool:
        if isinstance(other, MoveSequence):
            return self.to_list() == other.to_list()
        return NotImplemented

    def __repr__(self) -> str:
        return f"MoveSequence({self.to_list()!r})"


def extract_moves(record: str) -> MoveSequence:
    """Extract the ordered move tokens of a game record."""
    return MoveSequence(record)
