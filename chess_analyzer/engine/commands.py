"""
Command vocabulary and response terminators.

The protocol frames responses by sentinel lines, and different commands
end with different sentinels ("readyok" for synchronization, a line
starting with "bestmove" for search results). Both the command strings and
the terminators live in a CommandSet so that engines with a different
vocabulary can be driven by swapping the set.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple, Union


@dataclass(frozen=True)
class Exact:
    """Terminator matching a line equal to ``text``."""

    text: str

    def __call__(self, line: str) -> bool:
        return line == self.text


@dataclass(frozen=True)
class Prefix:
    """Terminator matching any line starting with ``text``."""

    text: str

    def __call__(self, line: str) -> bool:
        return line.startswith(self.text)


Terminator = Union[Exact, Prefix]


def as_terminators(terminators: Iterable[Union[Terminator, str]]) -> Tuple[Terminator, ...]:
    """Normalize terminators; bare strings are treated as exact matches."""
    return tuple(Exact(t) if isinstance(t, str) else t for t in terminators)


def matches_any(line: str, terminators: Sequence[Terminator]) -> bool:
    """Check whether ``line`` satisfies any of the terminators."""
    return any(terminator(line) for terminator in terminators)


@dataclass(frozen=True)
class CommandSet:
    """
    Command templates for a UCI-style engine.

    Templates use str.format placeholders:
        position:            {fen}
        position_with_moves: {fen}, {moves} (space separated)
        analyse:             {depth}
    """

    hello: str = "isready"
    hello_terminators: Tuple[Terminator, ...] = (Exact("readyok"),)

    sync: str = "isready"
    sync_terminators: Tuple[Terminator, ...] = (Exact("readyok"),)

    position: str = "position fen {fen}"
    position_with_moves: str = "position fen {fen} moves {moves}"

    analyse: str = "go depth {depth}"
    analyse_terminators: Tuple[Terminator, ...] = (Prefix("bestmove"),)

    quit: str = "quit"

    def position_command(self, fen: str, moves: Sequence[str] = ()) -> str:
        """Build a position command for ``fen`` followed by ``moves``."""
        if not moves:
            return self.position.format(fen=fen)
        return self.position_with_moves.format(fen=fen, moves=" ".join(moves))

    def analyse_command(self, depth: int) -> str:
        """Build a fixed-depth analysis command."""
        return self.analyse.format(depth=depth)


UCI_COMMANDS = CommandSet()
