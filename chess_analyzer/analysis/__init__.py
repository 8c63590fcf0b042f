"""
Game analysis: move extraction, engine replay and move classification.
"""

from chess_analyzer.analysis.classifier import MoveCategory, classify, classify_optional
from chess_analyzer.analysis.pgn_parser import MoveSequence, extract_moves, iter_moves
from chess_analyzer.analysis.pipeline import (
    EvaluationPipeline,
    EvaluationResult,
    PipelineConfig,
    extract_score,
    run,
)

__all__ = [
    "MoveCategory",
    "classify",
    "classify_optional",
    "MoveSequence",
    "extract_moves",
    "iter_moves",
    "EvaluationPipeline",
    "EvaluationResult",
    "PipelineConfig",
    "extract_score",
    "run",
]
