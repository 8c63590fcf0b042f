"""Shared fixtures: an in-memory transport that replays scripted engine output."""

import sys
from collections import deque
from pathlib import Path

import pytest

from chess_analyzer.engine.errors import EngineIOError, EngineTimeout

MOCK_ENGINE = Path(__file__).parent / "fixtures" / "mock_engine.py"

EOF_MARK = None


def uci_responder(score="25"):
    """Build a responder answering like a UCI engine with a fixed score."""

    def respond(command):
        if command == "isready":
            return ["readyok"]
        if command.startswith("go"):
            return [
                "info depth 1 score cp 13 nodes 20",
                f"bestmove e7e5 ponder g1f3 score {score}",
            ]
        return []

    return respond


class ScriptedTransport:
    """
    Transport double driven by a responder function.

    The responder maps each written command to the lines the engine would
    print; a None entry marks end of stream. When no output is pending,
    read_line() raises EngineTimeout instead of blocking.
    """

    def __init__(self, responder=None):
        self.responder = responder or uci_responder()
        self.written = []
        self.close_calls = 0
        self.exit_waits = 0
        self.terminate_signals = 0
        self.closed = False
        self._pending = deque()
        self._eof = False

    def write_line(self, text):
        if self.closed:
            raise EngineIOError("Transport is closed", command=text)
        self.written.append(text)
        self._pending.extend(self.responder(text))

    def read_line(self, timeout=None):
        if self._eof:
            return None
        if not self._pending:
            raise EngineTimeout(f"No engine output within {timeout}s")
        line = self._pending.popleft()
        if line is EOF_MARK:
            self._eof = True
        return line

    def wait_for_exit(self, timeout):
        self.exit_waits += 1
        return "quit" in self.written

    def close(self):
        self.close_calls += 1
        if self.closed:
            return
        self.closed = True
        self.terminate_signals += 1


@pytest.fixture
def transport():
    return ScriptedTransport()


@pytest.fixture
def mock_engine_args():
    """Argv prefix for running the mock engine with the current interpreter."""
    return sys.executable, [str(MOCK_ENGINE)]
