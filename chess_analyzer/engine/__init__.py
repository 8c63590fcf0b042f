"""
Engine Communication

Drives an external UCI-style engine over its standard input/output.

Key Components:
    - EngineTransport: owns the subprocess, writes and reads text lines
    - EngineSession: request/response framing on top of the transport
    - CommandSet: command templates and response terminators
    - errors: exception hierarchy rooted at EngineError

Data Flow:
    command → EngineSession.send() → EngineTransport.write_line()
    EngineTransport.read_line() × N → ResponseFrame (until terminator)
"""

from chess_analyzer.engine.commands import CommandSet, Exact, Prefix, UCI_COMMANDS
from chess_analyzer.engine.errors import (
    EngineError,
    EngineIOError,
    EngineStreamClosed,
    EngineTimeout,
    ProcessLaunchError,
    SessionClosed,
    SessionNotStarted,
)
from chess_analyzer.engine.session import EngineSession, ResponseFrame, SessionState
from chess_analyzer.engine.transport import EngineTransport

__all__ = [
    "CommandSet",
    "Exact",
    "Prefix",
    "UCI_COMMANDS",
    "EngineError",
    "EngineIOError",
    "EngineStreamClosed",
    "EngineTimeout",
    "ProcessLaunchError",
    "SessionClosed",
    "SessionNotStarted",
    "EngineSession",
    "ResponseFrame",
    "SessionState",
    "EngineTransport",
]
