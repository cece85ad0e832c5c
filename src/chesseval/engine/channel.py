"""Line-oriented channel to an engine subprocess."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Protocol

from PyQt6.QtCore import QObject, QProcess, pyqtSignal

from chesseval.engine.errors import EngineFaultError, EngineStartError
from chesseval.engine.protocol import QUIT

_LOGGER = logging.getLogger(__name__)


class ChannelSignal(Protocol):
    """Minimal signal interface consumed by :class:`EngineSession`."""

    def connect(self, slot: Callable[..., object]) -> object: ...


class EngineChannel(Protocol):
    """Owner of the engine's input and output streams."""

    @property
    def line_received(self) -> ChannelSignal: ...

    @property
    def closed(self) -> ChannelSignal: ...

    def open(self) -> None: ...

    def send(self, command: str) -> None: ...

    def close(self) -> None: ...


class ProcessChannel(QObject):
    """:class:`EngineChannel` backed by a :class:`QProcess`.

    Output is decoded as UTF-8, split on newlines and emitted one line at a
    time through ``line_received``. An unexpected exit or crash is reported
    once through ``closed`` with a human-readable reason.
    """

    line_received = pyqtSignal(str)
    closed = pyqtSignal(str)

    _START_TIMEOUT_MS = 3000
    _QUIT_GRACE_MS = 1000

    def __init__(
        self,
        program: str,
        arguments: Sequence[str] = (),
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._program = program
        self._arguments = list(arguments)
        self._process: QProcess | None = None
        self._buffer = b""
        self._is_closing = False
        self._closed_reported = False

    @property
    def is_running(self) -> bool:
        return (
            self._process is not None
            and self._process.state() == QProcess.ProcessState.Running
        )

    def open(self) -> None:
        """Spawn the engine process; raise :class:`EngineStartError` on failure."""
        if self.is_running:
            return

        process = QProcess(self)
        process.setProgram(self._program)
        process.setArguments(self._arguments)
        process.setProcessChannelMode(QProcess.ProcessChannelMode.SeparateChannels)
        process.start()
        if not process.waitForStarted(self._START_TIMEOUT_MS):
            reason = process.errorString()
            process.deleteLater()
            raise EngineStartError(
                f"Could not start engine {self._program!r}: {reason}"
            )

        process.readyReadStandardOutput.connect(self._on_ready_read)
        process.errorOccurred.connect(self._on_error)
        process.finished.connect(self._on_finished)
        self._process = process
        self._buffer = b""
        self._is_closing = False
        self._closed_reported = False
        _LOGGER.info("Started engine %s (pid %s)", self._program, process.processId())

    def send(self, command: str) -> None:
        """Write one command line to the engine."""
        if not self.is_running:
            raise EngineFaultError("Engine process is not running")
        assert self._process is not None
        _LOGGER.debug(">> %s", command)
        self._process.write(f"{command}\n".encode())

    def close(self) -> None:
        """Ask the engine to quit, killing it if it does not comply in time."""
        process = self._process
        if process is None:
            return
        self._is_closing = True
        if process.state() != QProcess.ProcessState.NotRunning:
            process.write(f"{QUIT}\n".encode())
            process.closeWriteChannel()
            if not process.waitForFinished(self._QUIT_GRACE_MS):
                _LOGGER.warning("Engine did not quit in time, killing it")
                process.kill()
                process.waitForFinished(self._QUIT_GRACE_MS)
        self._process = None
        process.deleteLater()

    def _on_ready_read(self) -> None:
        process = self._process
        if process is None:
            return
        self._feed(bytes(process.readAllStandardOutput()))

    def _feed(self, data: bytes) -> None:
        # A chunk may end inside a multi-byte character; decode whole lines only.
        self._buffer += data
        while b"\n" in self._buffer:
            raw, self._buffer = self._buffer.split(b"\n", 1)
            line = raw.rstrip(b"\r").decode("utf-8", "replace")
            if not line:
                continue
            _LOGGER.debug("<< %s", line)
            self.line_received.emit(line)

    def _on_error(self, error: QProcess.ProcessError) -> None:
        if error in (QProcess.ProcessError.Crashed, QProcess.ProcessError.Timedout):
            # Crashes are reported by ``finished``; Timedout only means a
            # waitFor* call expired.
            return
        reason = self._process.errorString() if self._process else error.name
        self._report_closed(f"{error.name}: {reason}")

    def _on_finished(self, exit_code: int, exit_status: QProcess.ExitStatus) -> None:
        if exit_status == QProcess.ExitStatus.CrashExit:
            self._report_closed("engine process crashed")
        else:
            self._report_closed(f"engine process exited with code {exit_code}")

    def _report_closed(self, reason: str) -> None:
        if self._is_closing or self._closed_reported:
            return
        self._closed_reported = True
        _LOGGER.error("Engine channel closed: %s", reason)
        self.closed.emit(reason)
