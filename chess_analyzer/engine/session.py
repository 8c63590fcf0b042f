"""
Synchronous request/response session with an engine.

Protocol Flow:
    Client → "isready"
    Engine → "readyok"                       (hello, matched exactly)
    Client → "position fen <FEN> moves e2e4"  (no response expected)
    Client → "go depth 15"
    Engine → "info depth 1 score cp 20 ..."
    Engine → "bestmove e7e5"                 (matched by prefix)
    Client → "quit"

Each send() writes one command and collects lines until one of the
command's terminators matches. The protocol carries no request ids, so
only one command may be outstanding at a time; concurrent callers are
serialized on a lock.

Lifecycle:
    UNSTARTED --initialize()--> READY --shutdown()/fatal error--> CLOSED
"""

import enum
import logging
import threading
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple, Union

from chess_analyzer.engine.commands import (
    CommandSet,
    Terminator,
    UCI_COMMANDS,
    as_terminators,
    matches_any,
)
from chess_analyzer.engine.errors import (
    EngineError,
    EngineStreamClosed,
    EngineTimeout,
    SessionClosed,
    SessionNotStarted,
)
from chess_analyzer.engine.transport import EngineTransport

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    UNSTARTED = "unstarted"
    READY = "ready"
    CLOSED = "closed"


class _ReadState(enum.Enum):
    AWAITING_LINE = enum.auto()
    MATCHED = enum.auto()
    STREAM_ENDED = enum.auto()


@dataclass(frozen=True)
class ResponseFrame:
    """Lines collected for one command, terminator line included."""

    lines: Tuple[str, ...] = ()
    terminator: Optional[str] = None

    @property
    def text(self) -> str:
        """Raw response as newline-joined text."""
        return "".join(line + "\n" for line in self.lines)

    @property
    def last_line(self) -> Optional[str]:
        return self.lines[-1] if self.lines else None

    def __len__(self) -> int:
        return len(self.lines)


class EngineSession:
    """
    One conversation with an engine subprocess.

    The session exclusively owns its transport. Any fatal error (I/O
    failure, stream closed mid-frame, read timeout) closes the session and
    terminates the engine before the error propagates.

    Example:
        with EngineSession("/usr/bin/stockfish") as session:
            frame = session.send("go depth 10", [Prefix("bestmove")])
            print(frame.terminator)
    """

    def __init__(
        self,
        engine_path: Optional[str] = None,
        commands: Optional[CommandSet] = None,
        read_timeout: Optional[float] = None,
        engine_args: Sequence[str] = (),
        transport=None,
        quit_timeout: float = 1.0,
    ):
        """
        Create a session and spawn the engine.

        Args:
            engine_path: Path to the engine executable
            commands: Command vocabulary (default: UCI)
            read_timeout: Per-line read timeout in seconds (None = no timeout)
            engine_args: Extra arguments for the engine executable
            transport: Pre-built transport to use instead of spawning one
            quit_timeout: Seconds shutdown() waits for the engine to exit
                after quit before terminating it

        Raises:
            ProcessLaunchError: If the engine cannot be started
            ValueError: If neither engine_path nor transport is given
        """
        if transport is None:
            if engine_path is None:
                raise ValueError("engine_path is required when no transport is given")
            transport = EngineTransport(engine_path, args=engine_args)

        self.engine_path = engine_path
        self.commands = commands or UCI_COMMANDS
        self.read_timeout = read_timeout
        self.quit_timeout = quit_timeout

        self._transport = transport
        self._state = SessionState.UNSTARTED
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config) -> "EngineSession":
        """Create a session from an EngineConfig."""
        return cls(
            engine_path=config.engine_path,
            commands=config.commands,
            read_timeout=config.read_timeout,
            engine_args=config.engine_args,
        )

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_alive(self) -> bool:
        return self._state is not SessionState.CLOSED

    def __enter__(self):
        try:
            self.initialize()
        except BaseException:
            self.shutdown()
            raise
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown()
        return False

    def initialize(self):
        """
        Perform the startup handshake.

        Sends the hello command and waits for its terminator. Calling this
        on a session that is already READY is a no-op.

        Raises:
            SessionClosed: If the session was shut down
            EngineStreamClosed: If the engine exits during the handshake
        """
        with self._lock:
            if self._state is SessionState.CLOSED:
                raise SessionClosed("Session is closed", command=self.commands.hello)
            if self._state is SessionState.READY:
                return

            logger.info("Engine handshake...")
            self._exchange(self.commands.hello, self.commands.hello_terminators)
            self._state = SessionState.READY
            logger.info("Engine ready")

    def send(
        self,
        command: str,
        terminators: Iterable[Union[Terminator, str]] = (),
    ) -> ResponseFrame:
        """
        Send a command and collect its response.

        Args:
            command: Command line without trailing newline
            terminators: Predicates ending collection after the matching
                line; strings are exact matches. Empty means no response
                is expected and an empty frame is returned immediately.

        Returns:
            ResponseFrame whose last line satisfies one of the terminators

        Raises:
            SessionNotStarted: If initialize() has not completed
            SessionClosed: If the session was shut down or failed earlier
            EngineStreamClosed: If the engine output ended mid-frame
            EngineTimeout: If a read exceeded the session read timeout
            EngineIOError: If the command could not be written
        """
        terminators = as_terminators(terminators)

        with self._lock:
            if self._state is SessionState.CLOSED:
                raise SessionClosed("Session is closed", command=command)
            if self._state is SessionState.UNSTARTED:
                raise SessionNotStarted(
                    "Session not initialized; call initialize() first", command=command
                )
            return self._exchange(command, terminators)

    def post(self, command: str):
        """Send a command that produces no response."""
        self.send(command)

    def sync(self) -> ResponseFrame:
        """Readiness handshake: wait until the engine has caught up."""
        return self.send(self.commands.sync, self.commands.sync_terminators)

    def shutdown(self):
        """
        Send the quit command and tear down the engine.

        Safe to call more than once; later calls do nothing.
        """
        with self._lock:
            if self._state is SessionState.CLOSED:
                return

            try:
                self._write(self.commands.quit)
            except EngineError as e:
                logger.warning(f"Could not send quit to engine: {e}")
            else:
                if not self._transport.wait_for_exit(self.quit_timeout):
                    logger.warning(f"Engine still running {self.quit_timeout}s after quit")

            self._close()
            logger.info("Session shut down")

    def _exchange(self, command: str, terminators: Tuple[Terminator, ...]) -> ResponseFrame:
        try:
            self._write(command)
            if not terminators:
                return ResponseFrame()
            return self._collect(command, terminators)
        except EngineError as e:
            logger.error(f"Fatal engine error, closing session: {e}")
            self._close()
            raise

    def _write(self, command: str):
        logger.debug(f">>> {command}")
        self._transport.write_line(command)

    def _collect(self, command: str, terminators: Tuple[Terminator, ...]) -> ResponseFrame:
        lines = []
        state = _ReadState.AWAITING_LINE

        while state is _ReadState.AWAITING_LINE:
            try:
                line = self._transport.read_line(timeout=self.read_timeout)
            except EngineTimeout as e:
                raise EngineTimeout(str(e), command=command) from e

            if line is None:
                state = _ReadState.STREAM_ENDED
                continue

            logger.debug(f"<<< {line}")
            lines.append(line)
            if matches_any(line, terminators):
                state = _ReadState.MATCHED

        if state is _ReadState.STREAM_ENDED:
            raise EngineStreamClosed(
                f"Engine output ended after {len(lines)} lines without a terminator",
                command=command,
            )

        return ResponseFrame(lines=tuple(lines), terminator=lines[-1])

    def _close(self):
        self._state = SessionState.CLOSED
        self._transport.close()
