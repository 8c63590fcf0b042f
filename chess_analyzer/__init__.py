"""
Chess Analyzer

Replays the moves of a game record against a UCI engine (Stockfish by
default) and labels every move as a good move, inaccuracy, mistake or
blunder from the score the engine reports.

## Architecture

1. **engine**: Engine subprocess communication
   - EngineTransport: spawns the engine, reads and writes text lines
   - EngineSession: request/response framing with sentinel terminators
   - CommandSet: swappable command vocabulary

2. **analysis**: Game analysis
   - extract_moves: coordinate-notation move tokens from a PGN string
   - EvaluationPipeline: per-move engine replay
   - classify: score → MoveCategory

3. **config**: EngineConfig and engine auto-detection

## Quick Start

```python
from chess_analyzer.config import EngineConfig
from chess_analyzer.engine import EngineSession
from chess_analyzer.analysis import EvaluationPipeline, PipelineConfig

with EngineSession.from_config(EngineConfig()) as session:
    pipeline = EvaluationPipeline(session, PipelineConfig(depth=12))
    for result in pipeline.analyze_game(pgn_text):
        print(result.move, result.score, result.category)
```

## Version

0.1.0
"""

__version__ = "0.1.0"
__license__ = "MIT"

from chess_analyzer.analysis import (
    EvaluationPipeline,
    EvaluationResult,
    MoveCategory,
    PipelineConfig,
    classify,
    extract_moves,
)
from chess_analyzer.config import EngineConfig
from chess_analyzer.engine import EngineSession

__all__ = [
    "EvaluationPipeline",
    "EvaluationResult",
    "MoveCategory",
    "PipelineConfig",
    "classify",
    "extract_moves",
    "EngineConfig",
    "EngineSession",
]
