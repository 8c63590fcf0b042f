#!/usr/bin/env python3
"""
CLI tool for analyzing a game move by move with a UCI engine.

Usage:
    python tools/analyze_game.py game.pgn --depth 15

    python tools/analyze_game.py --sample \\
        --engine-path /usr/local/bin/stockfish \\
        --cumulative --timeout 30
"""

import argparse
import logging
import sys
from pathlib import Path

from tqdm import tqdm

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from chess_analyzer.analysis import EvaluationPipeline, PipelineConfig, extract_moves
from chess_analyzer.config import EngineConfig
from chess_analyzer.engine import EngineError, EngineSession

SAMPLE_PGN = """[Event "Casual Game"]
[White "WhitePlayer"]
[Black "BlackPlayer"]
1. e2e4 d7d6 2. d2d4 g8f6 3. b1c3 g7g6 4. c1e3 f8g7 5. d1d2 c7c6 6. f2f3 b7b5
7. g1e2 b8d7 8. e3h6 g7h6 9. d2h6 c8b7 10. a2a3 e7e5 1-0
"""


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def load_record(args) -> str:
    """Read the game record to analyze."""
    if args.sample:
        return SAMPLE_PGN

    pgn_path = Path(args.pgn)
    if not pgn_path.exists():
        print(f"Error: PGN file not found: {pgn_path}")
        sys.exit(1)

    return pgn_path.read_text(encoding="utf-8", errors="ignore")


def analyze(args):
    """Run the evaluation pipeline and print one block per move."""
    record = load_record(args)
    moves = extract_moves(record)

    engine_config = EngineConfig(
        engine_path=args.engine_path,
        read_timeout=args.timeout,
    )
    pipeline_config = PipelineConfig(
        depth=args.depth,
        cumulative=args.cumulative,
        score_from_info=args.score_from_info,
    )

    with EngineSession.from_config(engine_config) as session:
        pipeline = EvaluationPipeline(session, pipeline_config)

        for result in tqdm(pipeline.run(moves), total=len(moves), desc="Evaluating moves"):
            tqdm.write(f"Move: {result.move}")
            if result.has_score:
                tqdm.write(f"Evaluation score: {result.score}")
            tqdm.write(f"Move categorization: {result.category}")
            if args.show_response:
                tqdm.write(f"Analysis: {result.raw_response}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Classify the moves of a game with a UCI engine",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "pgn",
        nargs="?",
        help="PGN file to analyze",
    )
    parser.add_argument(
        "--sample",
        action="store_true",
        help="Analyze the built-in sample game instead of a file",
    )
    parser.add_argument(
        "--engine-path",
        type=str,
        default=None,
        help="Path to engine binary (default: auto-detect Stockfish)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=15,
        help="Engine search depth",
    )
    parser.add_argument(
        "--cumulative",
        action="store_true",
        help="Send the full move prefix instead of start position + current move",
    )
    parser.add_argument(
        "--score-from-info",
        action="store_true",
        help="Read the score from the engine's info lines",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for each engine line (default: no timeout)",
    )
    parser.add_argument(
        "--show-response",
        action="store_true",
        help="Print the raw engine response for each move",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    if args.pgn is None and not args.sample:
        parser.print_help()
        sys.exit(1)

    setup_logging(verbose=args.verbose)

    try:
        analyze(args)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(1)
    except (EngineError, FileNotFoundError, ValueError) as e:
        print(f"\n\nError: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
