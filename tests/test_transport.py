"""
Integration Tests for EngineTransport

Runs tests/fixtures/mock_engine.py as a real subprocess.
"""

import pytest

from chess_analyzer.analysis import EvaluationPipeline, MoveCategory
from chess_analyzer.engine import (
    EngineIOError,
    EngineSession,
    EngineStreamClosed,
    EngineTimeout,
    EngineTransport,
    Prefix,
    ProcessLaunchError,
    SessionClosed,
    SessionState,
)


@pytest.fixture
def mock_transport(mock_engine_args):
    """Transport connected to the mock engine."""
    executable, args = mock_engine_args
    transport = EngineTransport(executable, args=args)
    yield transport
    transport.close()


class TestEngineTransport:
    """Tests for the subprocess transport."""

    def test_missing_executable(self, tmp_path):
        """Test that a missing binary raises ProcessLaunchError."""
        with pytest.raises(ProcessLaunchError):
            EngineTransport(str(tmp_path / "no-such-engine"))

    def test_write_and_read_line(self, mock_transport):
        """Test a single command/response round trip."""
        mock_transport.write_line("isready")

        assert mock_transport.read_line(timeout=10) == "readyok"

    def test_end_of_stream_returns_none(self, mock_transport):
        """Test that engine exit is reported as None, repeatedly."""
        mock_transport.write_line("quit")

        assert mock_transport.read_line(timeout=10) is None
        assert mock_transport.read_line(timeout=10) is None

    def test_read_timeout(self, mock_transport):
        """Test that a silent engine raises EngineTimeout."""
        with pytest.raises(EngineTimeout):
            mock_transport.read_line(timeout=0.2)

    def test_undecodable_bytes_are_replaced(self, mock_engine_args):
        """Test that invalid UTF-8 output does not end the stream."""
        executable, args = mock_engine_args
        transport = EngineTransport(executable, args=args + ["--bad-bytes"])

        try:
            transport.write_line("go depth 1")
            garbled = transport.read_line(timeout=10)

            assert garbled.startswith("info string NNUE file")
            assert "�" in garbled
            assert transport.read_line(timeout=10) == "info depth 1 score cp 42 nodes 20"
            assert transport.read_line(timeout=10) == "bestmove 0000 score 42"
            assert transport.is_running()
        finally:
            transport.close()

    def test_write_after_exit_fails(self, mock_transport):
        """Test that writing to an exited engine raises EngineIOError."""
        mock_transport.write_line("quit")
        assert mock_transport.read_line(timeout=10) is None
        mock_transport._process.wait(timeout=10)

        with pytest.raises(EngineIOError):
            mock_transport.write_line("isready")

    def test_wait_for_exit(self, mock_transport):
        """Test waiting for the engine to exit after quit."""
        assert not mock_transport.wait_for_exit(0.2)

        mock_transport.write_line("quit")

        assert mock_transport.wait_for_exit(10)
        assert mock_transport._process.returncode == 0

    def test_close_terminates_process(self, mock_transport):
        """Test that close() stops a running engine."""
        assert mock_transport.is_running()

        mock_transport.close()

        assert mock_transport.closed
        assert not mock_transport.is_running()

    def test_close_is_idempotent(self, mock_transport, monkeypatch):
        """Test that a second close() sends no further terminate signal."""
        process = mock_transport._process
        terminate_calls = []
        original_terminate = process.terminate

        def counting_terminate():
            terminate_calls.append(process.pid)
            original_terminate()

        monkeypatch.setattr(process, "terminate", counting_terminate)

        mock_transport.close()
        returncode = process.returncode
        mock_transport.close()

        assert len(terminate_calls) == 1
        assert process.returncode == returncode
        assert mock_transport.closed

    def test_close_after_exit_sends_no_terminate(self, mock_transport, monkeypatch):
        """Test that an engine that already exited is not signalled."""
        process = mock_transport._process
        terminate_calls = []
        monkeypatch.setattr(process, "terminate", lambda: terminate_calls.append(1))

        mock_transport.write_line("quit")
        assert mock_transport.wait_for_exit(10)
        mock_transport.close()

        assert terminate_calls == []
        assert process.returncode == 0

    def test_write_after_close_fails(self, mock_transport):
        """Test that writing after close() raises EngineIOError."""
        mock_transport.close()

        with pytest.raises(EngineIOError):
            mock_transport.write_line("isready")


class TestSessionOverSubprocess:
    """End-to-end session tests against the mock engine."""

    def test_handshake_and_search(self, mock_engine_args):
        """Test a full handshake, search and shutdown."""
        executable, args = mock_engine_args

        with EngineSession(executable, engine_args=args, read_timeout=10) as session:
            session.post("position fen 8/8/8/8/8/8/8/8 w - - 0 1 moves e2e4")
            frame = session.send("go depth 1", [Prefix("bestmove")])

        assert frame.terminator == "bestmove e2e4 score 42"
        assert session.state is SessionState.CLOSED

    def test_quit_exits_cleanly(self, mock_engine_args):
        """Test that shutdown() lets the engine act on quit."""
        executable, args = mock_engine_args
        session = EngineSession(executable, engine_args=args, read_timeout=10, quit_timeout=10)
        session.initialize()

        session.shutdown()

        assert session._transport._process.returncode == 0

    def test_undecodable_output_does_not_abort(self, mock_engine_args):
        """Test that a garbled info line still yields a scored result."""
        executable, args = mock_engine_args
        engine_args = args + ["--bad-bytes", "--score", "120"]

        with EngineSession(executable, engine_args=engine_args, read_timeout=10) as session:
            (result,) = EvaluationPipeline(session).run(["e2e4"])

        assert result.score == 120
        assert result.category is MoveCategory.MISTAKE
        assert "�" in result.response.lines[0]

    def test_engine_dies_mid_frame(self, mock_engine_args):
        """Test that engine exit mid-frame closes the session."""
        executable, args = mock_engine_args
        session = EngineSession(executable, engine_args=args + ["--die-on-go"], read_timeout=10)
        session.initialize()

        with pytest.raises(EngineStreamClosed):
            session.send("go depth 1", [Prefix("bestmove")])

        assert session.state is SessionState.CLOSED
        with pytest.raises(SessionClosed):
            session.send("isready", ["readyok"])

    def test_engine_hangs(self, mock_engine_args):
        """Test that a hung engine times out and is terminated."""
        executable, args = mock_engine_args
        session = EngineSession(executable, engine_args=args + ["--hang-on-go"], read_timeout=0.5)
        session.initialize()

        with pytest.raises(EngineTimeout):
            session.send("go depth 1", [Prefix("bestmove")])

        assert session.state is SessionState.CLOSED
        assert not session._transport.is_running()
