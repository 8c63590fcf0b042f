"""
Move-by-move evaluation of a game against an engine.

For every move the pipeline sets a position, asks the engine to search to
a fixed depth, pulls a score out of the response and classifies it.

Position policy:
    By default each move is evaluated from the fixed starting position,
    i.e. move i is sent as "start + [move i]" and not as the game
    continuation "start + moves 1..i". This matches the behaviour the
    analyzer has always had, and it means later moves are judged out of
    context. Set PipelineConfig.cumulative to send the full move prefix.

Failures:
    Engine and session errors abort the run. A response without a usable
    score only degrades that one result (score None, Good move).
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence

import chess

from chess_analyzer.analysis.classifier import MoveCategory, classify_optional
from chess_analyzer.analysis.pgn_parser import extract_moves
from chess_analyzer.engine.session import EngineSession, ResponseFrame

logger = logging.getLogger(__name__)

MATE_SCORE = 10000


@dataclass
class PipelineConfig:
    """Configuration for the evaluation pipeline."""

    depth: int = 15
    starting_fen: str = chess.STARTING_FEN

    # Position policy
    cumulative: bool = False
    set_initial_position: bool = True
    sync_after_position: bool = False

    # Score extraction
    score_from_info: bool = False

    def __post_init__(self):
        if self.depth <= 0:
            raise ValueError(f"depth must be positive, got {self.depth}")
        if not self.starting_fen.strip():
            raise ValueError("starting_fen must not be empty")


@dataclass(frozen=True)
class EvaluationResult:
    """Evaluation of a single move."""

    move: str
    response: ResponseFrame
    score: Optional[int]  # None if the response had no usable score
    category: MoveCategory

    @property
    def has_score(self) -> bool:
        return self.score is not None

    @property
    def raw_response(self) -> str:
        return self.response.text

    def to_dict(self) -> dict:
        return {
            "move": self.move,
            "score": self.score,
            "category": self.category.value,
            "response": self.raw_response,
        }


def _parse_int(token: str) -> Optional[int]:
    try:
        return int(token)
    except ValueError:
        return None


def _score_after(tokens: List[str]) -> Optional[int]:
    """Parse the value following a "score" token, if any."""
    if "score" not in tokens:
        return None

    idx = tokens.index("score") + 1
    if idx >= len(tokens):
        return None

    return _parse_int(tokens[idx])


def _info_score(tokens: List[str]) -> Optional[int]:
    """Parse "score cp N" / "score mate N" from an info line."""
    idx = tokens.index("score") + 1
    if idx + 1 < len(tokens) and tokens[idx] in ("cp", "mate"):
        value = _parse_int(tokens[idx + 1])
        if value is None or tokens[idx] == "cp":
            return value
        return MATE_SCORE if value > 0 else -MATE_SCORE
    return _score_after(tokens)


def extract_score(frame: ResponseFrame, from_info: bool = False) -> Optional[int]:
    """
    Pull a signed score out of an analysis response.

    Args:
        frame: Response collected for the analysis command
        from_info: Read the latest "info ... score" line instead of the
            terminal line

    Returns:
        The score, or None if no parsable score is present
    """
    if not from_info:
        if frame.terminator is None:
            return None
        return _score_after(frame.terminator.split(" "))

    for line in reversed(frame.lines):
        tokens = line.split()
        if "score" in tokens:
            return _info_score(tokens)
    return None


class EvaluationPipeline:
    """Replay a game's moves against an engine session."""

    def __init__(self, session: EngineSession, config: Optional[PipelineConfig] = None):
        """
        Initialize the pipeline.

        Args:
            session: Initialized engine session
            config: Pipeline configuration (uses defaults if None)
        """
        self.session = session
        self.config = config or PipelineConfig()

    def run(
        self, moves: Iterable[str], starting_position: Optional[str] = None
    ) -> Iterator[EvaluationResult]:
        """
        Evaluate moves one after another.

        Args:
            moves: Move tokens in game order
            starting_position: FEN to replay from (default: config.starting_fen)

        Yields:
            One EvaluationResult per move, in input order

        Raises:
            EngineError: On any transport or session failure
        """
        fen = starting_position or self.config.starting_fen
        commands = self.session.commands

        if self.config.set_initial_position:
            self._set_position(commands.position_command(fen))

        played: List[str] = []
        for ply, move in enumerate(moves, start=1):
            played.append(move)
            prefix = played if self.config.cumulative else [move]
            result = self._evaluate(fen, prefix)

            logger.debug(f"Ply {ply}: {move} score={result.score} ({result.category})")
            yield result

    def evaluate_move(
        self,
        move: str,
        prior_moves: Sequence[str] = (),
        starting_position: Optional[str] = None,
    ) -> EvaluationResult:
        """Evaluate one move played after ``prior_moves``."""
        fen = starting_position or self.config.starting_fen
        return self._evaluate(fen, [*prior_moves, move])

    def analyze_game(
        self, record: str, starting_position: Optional[str] = None
    ) -> List[EvaluationResult]:
        """Extract the moves of a game record and evaluate all of them."""
        moves = extract_moves(record)
        logger.info(f"Analyzing game: {len(moves)} moves")
        return list(self.run(moves, starting_position=starting_position))

    def _set_position(self, command: str):
        self.session.post(command)
        if self.config.sync_after_position:
            self.session.sync()

    def _evaluate(self, fen: str, moves: Sequence[str]) -> EvaluationResult:
        commands = self.session.commands

        self._set_position(commands.position_command(fen, moves))
        frame = self.session.send(
            commands.analyse_command(self.config.depth), commands.analyse_terminators
        )

        score = extract_score(frame, from_info=self.config.score_from_info)
        if score is None:
            logger.debug(f"No score in response to {moves[-1]}: {frame.terminator!r}")

        return EvaluationResult(
            move=moves[-1],
            response=frame,
            score=score,
            category=classify_optional(score),
        )


def run(
    session: EngineSession,
    moves: Iterable[str],
    starting_position: str = chess.STARTING_FEN,
    config: Optional[PipelineConfig] = None,
) -> Iterator[EvaluationResult]:
    """Evaluate ``moves`` from ``starting_position`` with a default pipeline."""
    return EvaluationPipeline(session, config).run(moves, starting_position)
