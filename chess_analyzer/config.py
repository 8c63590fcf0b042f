"""
Engine configuration.
"""

import logging
import shutil
from dataclasses import dataclass, field
from typing import Optional, Tuple

from chess_analyzer.engine.commands import CommandSet, UCI_COMMANDS

logger = logging.getLogger(__name__)

ENGINE_CANDIDATES = (
    "stockfish",
    "/usr/local/bin/stockfish",
    "/usr/bin/stockfish",
    "/usr/games/stockfish",
    "/opt/homebrew/bin/stockfish",
)


def find_engine() -> str:
    """
    Auto-detect a Stockfish binary.

    Returns:
        Path to the engine binary

    Raises:
        FileNotFoundError: If no engine is found
    """
    for candidate in ENGINE_CANDIDATES:
        path = shutil.which(candidate)
        if path:
            return path

    raise FileNotFoundError(
        "Stockfish not found. Install with: brew install stockfish (macOS) "
        "or apt install stockfish (Linux)"
    )


@dataclass
class EngineConfig:
    """Configuration for spawning and talking to an engine."""

    engine_path: Optional[str] = None
    """Path to the engine binary (None = auto-detect Stockfish)"""

    engine_args: Tuple[str, ...] = ()
    """Extra command line arguments passed to the engine"""

    read_timeout: Optional[float] = None
    """Seconds to wait for each response line (None = wait forever)"""

    commands: CommandSet = field(default_factory=lambda: UCI_COMMANDS)
    """Command vocabulary and terminators"""

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.engine_path is None:
            self.engine_path = find_engine()
            logger.info(f"Auto-detected engine: {self.engine_path}")

        self.engine_args = tuple(self.engine_args)

        if self.read_timeout is not None and self.read_timeout <= 0:
            raise ValueError(f"read_timeout must be positive, got {self.read_timeout}")
