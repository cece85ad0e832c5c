"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

# Linux CI runners are often headless. Force an offscreen backend only there.
if (
    sys.platform.startswith("linux")
    and "QT_QPA_PLATFORM" not in os.environ
    and "DISPLAY" not in os.environ
    and "WAYLAND_DISPLAY" not in os.environ
):
    os.environ["QT_QPA_PLATFORM"] = "offscreen"

from PyQt6.QtCore import QObject, QTimer, pyqtSignal  # noqa: E402

from chesseval.engine.errors import EngineFaultError  # noqa: E402

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture(scope="session")
def qapp() -> Iterator[object]:
    """Provide a singleton QApplication for tests that need an event loop."""
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


class ScriptedChannel(QObject):
    """In-process engine channel replaying canned output.

    Each ``go`` pops the next script (a list of output lines). ``uci`` gets
    the usual acknowledgement; ``isready`` and ``stop`` answer with
    ``ready_replies`` and ``stop_replies``. Replies are
    delivered through the event loop after ``reply_delay_ms``, or
    synchronously from ``send`` when the delay is ``None``.
    """

    line_received = pyqtSignal(str)
    closed = pyqtSignal(str)

    def __init__(
        self,
        scripts: list[list[str]] | None = None,
        *,
        reply_delay_ms: int | None = 0,
        answer_uci: bool = True,
        stop_replies: tuple[str, ...] = ("bestmove e2e4",),
        ready_replies: tuple[str, ...] = ("readyok",),
    ) -> None:
        super().__init__()
        self.scripts = [list(script) for script in scripts or []]
        self.reply_delay_ms = reply_delay_ms
        self.answer_uci = answer_uci
        self.stop_replies = list(stop_replies)
        self.ready_replies = list(ready_replies)
        self.sent: list[str] = []
        self.is_open = False
        self.open_count = 0
        self.close_count = 0

    def open(self) -> None:
        self.is_open = True
        self.open_count += 1

    def send(self, command: str) -> None:
        if not self.is_open:
            raise EngineFaultError("Engine process is not running")
        self.sent.append(command)
        if command == "uci":
            if self.answer_uci:
                self._reply(["id name Scripted", "uciok"])
        elif command == "isready":
            self._reply(self.ready_replies)
        elif command.startswith("go"):
            self._reply(self.scripts.pop(0) if self.scripts else [])
        elif command == "stop":
            self._reply(self.stop_replies)

    def close(self) -> None:
        self.is_open = False
        self.close_count += 1

    def crash(self, reason: str = "engine process crashed") -> None:
        self.is_open = False
        self.closed.emit(reason)

    def feed(self, line: str) -> None:
        """Deliver one unsolicited output line right away."""
        self.line_received.emit(line)

    def _reply(self, lines: list[str]) -> None:
        if self.reply_delay_ms is None:
            self._emit_all(list(lines))
            return
        QTimer.singleShot(self.reply_delay_ms, lambda: self._emit_all(list(lines)))

    def _emit_all(self, lines: list[str]) -> None:
        for line in lines:
            if not self.is_open:
                return
            self.line_received.emit(line)


@pytest.fixture
def scripted_channel() -> Callable[..., ScriptedChannel]:
    """Factory for :class:`ScriptedChannel` instances."""
    return ScriptedChannel


@pytest.fixture
def fake_engine_path() -> Path:
    """Path of the scripted UCI engine run through a real subprocess."""
    return FIXTURES_DIR / "fake_uci_engine.py"
