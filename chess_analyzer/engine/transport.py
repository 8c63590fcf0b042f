"""
Line-oriented transport over an engine subprocess.

The transport owns the child process and its two pipes and knows nothing
about the protocol spoken over them. stderr is merged into stdout, so
diagnostics printed by the engine show up as ordinary response lines.

Reading:
    A daemon thread pumps stdout into a queue. read_line() blocks on that
    queue, which lets callers bound the wait with a timeout; the thread
    enqueues an end-of-stream marker once the engine closes its output.
    Output is decoded as UTF-8 with undecodable bytes replaced, so a stray
    byte never ends the stream.
"""

import logging
import queue
import subprocess
import threading
from typing import Optional, Sequence

from chess_analyzer.engine.errors import EngineIOError, EngineTimeout, ProcessLaunchError

logger = logging.getLogger(__name__)

_EOF = object()


class EngineTransport:
    """Spawn an engine executable and exchange text lines with it."""

    def __init__(
        self,
        engine_path: str,
        args: Sequence[str] = (),
        terminate_grace: float = 1.0,
    ):
        """
        Start the engine process.

        Args:
            engine_path: Path to the engine executable
            args: Extra command line arguments for the engine
            terminate_grace: Seconds to wait after terminate() before kill()

        Raises:
            ProcessLaunchError: If the executable is missing or not runnable
        """
        self.engine_path = engine_path
        self.terminate_grace = terminate_grace

        try:
            self._process = subprocess.Popen(
                [engine_path, *args],
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
            )
        except OSError as e:
            raise ProcessLaunchError(f"Cannot start engine {engine_path}: {e}") from e

        self._lines: "queue.Queue[object]" = queue.Queue()
        self._eof = False
        self._closed = False

        self._reader = threading.Thread(
            target=self._pump_stdout, name="engine-stdout", daemon=True
        )
        self._reader.start()

        logger.info(f"Started engine: {engine_path} (pid={self._process.pid})")

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def closed(self) -> bool:
        return self._closed

    def is_running(self) -> bool:
        """Check if the child process has not exited yet."""
        return self._process.poll() is None

    def _pump_stdout(self):
        try:
            for line in self._process.stdout:
                self._lines.put(line.rstrip("\r\n"))
        except (OSError, ValueError):
            # expected only when close() shuts stdout underneath us
            if not self._closed:
                logger.exception("Engine stdout reader failed")
        finally:
            self._lines.put(_EOF)

    def write_line(self, text: str):
        """
        Write one line to the engine and flush it.

        Raises:
            EngineIOError: If the pipe is closed or the engine has exited
        """
        if self._closed:
            raise EngineIOError("Transport is closed", command=text)
        if not self.is_running():
            raise EngineIOError(
                f"Engine exited with code {self._process.returncode}", command=text
            )

        try:
            self._process.stdin.write(text + "\n")
            self._process.stdin.flush()
        except (OSError, ValueError) as e:
            raise EngineIOError(f"Write to engine failed: {e}", command=text) from e

    def read_line(self, timeout: Optional[float] = None) -> Optional[str]:
        """
        Read the next line from the engine.

        Args:
            timeout: Seconds to wait for a line (None = wait forever)

        Returns:
            The line without its newline, or None at end of stream

        Raises:
            EngineTimeout: If no line arrived within ``timeout``
        """
        if self._eof:
            return None

        try:
            item = self._lines.get(timeout=timeout)
        except queue.Empty:
            raise EngineTimeout(f"No engine output within {timeout}s") from None

        if item is _EOF:
            self._eof = True
            return None
        return item

    def wait_for_exit(self, timeout: float) -> bool:
        """
        Wait for the engine to exit on its own.

        Args:
            timeout: Seconds to wait

        Returns:
            True if the process has exited, False if it is still running
        """
        try:
            self._process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            return False
        return True

    def close(self):
        """Terminate the engine if still running and release both pipes."""
        if self._closed:
            return
        self._closed = True

        if self.is_running():
            logger.debug(f"Terminating engine pid={self._process.pid}")
            self._process.terminate()
            try:
                self._process.wait(timeout=self.terminate_grace)
            except subprocess.TimeoutExpired:
                logger.warning(f"Engine pid={self._process.pid} ignored terminate, killing")
                self._process.kill()
                self._process.wait()

        for stream in (self._process.stdin, self._process.stdout):
            try:
                stream.close()
            except (OSError, ValueError):
                pass

        logger.info(f"Engine stopped (exit code {self._process.returncode})")
