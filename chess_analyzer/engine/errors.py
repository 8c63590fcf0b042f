"""
Exceptions raised while talking to an engine subprocess.

Every transport or session failure is fatal for the session that raised
it: the session is closed before the exception propagates, and the caller
may build a new one. Per-move parsing problems are never raised; they are
absorbed by the evaluation pipeline.
"""

from typing import Optional


class EngineError(Exception):
    """
    Base class for engine communication errors.

    Attributes:
        command: The command that was in flight when the error occurred
    """

    def __init__(self, message: str, command: Optional[str] = None):
        if command is not None:
            message = f"{message} (command: {command!r})"
        super().__init__(message)
        self.command = command


class ProcessLaunchError(EngineError):
    """Engine executable is missing or could not be started."""


class EngineIOError(EngineError):
    """Writing to or reading from the engine pipes failed."""


class EngineStreamClosed(EngineError):
    """Engine output ended before the expected terminator was seen."""


class EngineTimeout(EngineStreamClosed):
    """No response line arrived within the configured read timeout."""


class SessionClosed(EngineError):
    """Command sent to a session that has already been shut down."""


class SessionNotStarted(EngineError):
    """Command sent before the startup handshake completed."""
