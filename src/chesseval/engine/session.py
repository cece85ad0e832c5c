"""Single-flight evaluation session over one UCI engine channel."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from PyQt6.QtCore import QEventLoop, QTimer

from chesseval.analysis.models import EvaluationFailed, EvaluationResult
from chesseval.analysis.score import normalize_score
from chesseval.core.position import Position
from chesseval.engine.channel import EngineChannel
from chesseval.engine.errors import (
    EngineBusyError,
    EngineFaultError,
    EngineStartError,
)
from chesseval.engine.protocol import (
    IS_READY,
    NEW_GAME,
    STOP,
    UCI,
    BestMove,
    ScoreUpdate,
    UciOk,
    go_depth_command,
    parse_line,
    position_command,
)

_LOGGER = logging.getLogger(__name__)

DEFAULT_DEPTH = 15
DEFAULT_TIMEOUT_MS = 5000

TIMEOUT_REASON = "timeout"
NO_EVALUATION_REASON = "no evaluation produced"
CLOSED_REASON = "engine session closed"


class SessionState(StrEnum):
    """Lifecycle of the engine behind an :class:`EngineSession`."""

    OFFLINE = "offline"
    IDLE = "idle"
    AWAITING_BEST_MOVE = "awaiting_best_move"
    TIMED_OUT = "timed_out"
    FAULTED = "faulted"


@dataclass(slots=True)
class _PendingRequest:
    """The one evaluation currently in flight."""

    request_id: int
    position: Position
    depth: int
    draining: bool = False
    search_sent: bool = False
    latest: EvaluationResult | None = None
    result: EvaluationResult | None = None

    @property
    def is_resolved(self) -> bool:
        return self.result is not None


class EngineSession:
    """Owns the engine channel and resolves one evaluation at a time.

    :meth:`evaluate` blocks the caller in a local :class:`QEventLoop` while
    engine output and the timeout timer are delivered by the running Qt
    event loop. Whichever of ``bestmove``, the timer or a channel fault comes
    first resolves the request; everything after that is discarded.
    """

    __slots__ = (
        "__weakref__",
        "_channel",
        "_on_state_changed",
        "_handshake_timeout_ms",
        "_timer",
        "_loop",
        "_state",
        "_pending",
        "_next_request_id",
        "_unfinished_searches",
        "_awaiting_uciok",
        "_fault_reason",
        "_is_connected",
        "_is_shutting_down",
    )

    def __init__(
        self,
        channel: EngineChannel,
        *,
        handshake_timeout_ms: int = 5000,
        on_state_changed: Callable[[SessionState], None] | None = None,
    ) -> None:
        self._channel = channel
        self._on_state_changed = on_state_changed
        self._handshake_timeout_ms = handshake_timeout_ms

        self._timer = QTimer()
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._on_timeout)
        self._loop: QEventLoop | None = None

        self._state = SessionState.OFFLINE
        self._pending: _PendingRequest | None = None
        self._next_request_id = 0
        self._unfinished_searches = 0
        self._awaiting_uciok = False
        self._fault_reason: str | None = None
        self._is_connected = False
        self._is_shutting_down = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._pending is not None

    def start(self) -> None:
        """Open the channel and complete the UCI handshake.

        Idempotent while the session is running. A faulted or shut down
        session is re-initialised. Raises :class:`EngineStartError` when the
        engine cannot be started or does not answer ``uciok`` in time.
        """
        if self._state not in (SessionState.OFFLINE, SessionState.FAULTED):
            return
        if not self._is_connected:
            self._channel.line_received.connect(self._on_line)
            self._channel.closed.connect(self._on_channel_closed)
            self._is_connected = True

        self._is_shutting_down = False
        self._fault_reason = None
        self._unfinished_searches = 0
        self._channel.open()
        self._set_state(SessionState.IDLE)

        self._awaiting_uciok = True
        if self._send(UCI) and self._awaiting_uciok:
            self._timer.start(self._handshake_timeout_ms)
            self._run_loop(lambda: not self._awaiting_uciok)
        self._timer.stop()

        if self._state is SessionState.FAULTED:
            self._awaiting_uciok = False
            raise EngineStartError(f"Engine failed during handshake: {self._fault_reason}")
        if self._awaiting_uciok:
            self._awaiting_uciok = False
            self.shutdown()
            raise EngineStartError(
                f"Engine did not answer uciok within {self._handshake_timeout_ms} ms"
            )
        _LOGGER.info("Engine session ready")

    def shutdown(self) -> None:
        """Resolve any pending request, then close the engine channel."""
        if self._state is SessionState.OFFLINE:
            return
        self._is_shutting_down = True
        self._timer.stop()
        request = self._pending
        if request is not None:
            self._resolve(request, EvaluationFailed(CLOSED_REASON))
        self._channel.close()
        self._set_state(SessionState.OFFLINE)

    def evaluate(
        self,
        position: Position,
        *,
        depth: int = DEFAULT_DEPTH,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ) -> EvaluationResult:
        """Evaluate *position* and return once the request has resolved."""
        if self._pending is not None:
            raise EngineBusyError(
                f"Request {self._pending.request_id} is still awaiting bestmove"
            )
        if self._state is SessionState.FAULTED:
            raise EngineFaultError(f"Engine session faulted: {self._fault_reason}")
        if self._state is SessionState.OFFLINE:
            raise EngineFaultError("Engine session is not started")
        if depth < 1:
            raise ValueError(f"Search depth must be >= 1, got {depth}")
        if timeout_ms <= 0:
            raise ValueError(f"Timeout must be positive, got {timeout_ms} ms")

        self._next_request_id += 1
        request = _PendingRequest(
            request_id=self._next_request_id,
            position=position,
            depth=depth,
        )
        self._pending = request
        self._set_state(SessionState.AWAITING_BEST_MOVE)

        if self._unfinished_searches:
            # The search starts once every stopped search has sent its
            # bestmove. readyok is not a barrier for that.
            request.draining = True
            self._send(IS_READY)
        else:
            self._send_search(request)

        if not request.is_resolved:
            self._timer.start(timeout_ms)
            self._run_loop(lambda: request.is_resolved)

        result = request.result
        assert result is not None
        return result

    def _send_search(self, request: _PendingRequest) -> None:
        for command in (
            NEW_GAME,
            position_command(request.position.fen),
            go_depth_command(request.depth),
        ):
            if not self._send(command):
                return
        request.search_sent = True

    def _start_drained_search(self) -> None:
        request = self._pending
        if self._unfinished_searches or request is None or not request.draining:
            return
        request.draining = False
        self._send_search(request)

    def _send(self, command: str) -> bool:
        try:
            self._channel.send(command)
        except EngineFaultError as exc:
            self._on_channel_closed(str(exc))
            return False
        return True

    def _run_loop(self, is_done: Callable[[], bool]) -> None:
        loop = QEventLoop()
        self._loop = loop
        try:
            if not is_done():
                loop.exec()
        finally:
            self._loop = None

    def _wake(self) -> None:
        if self._loop is not None:
            self._loop.quit()

    def _resolve(self, request: _PendingRequest, result: EvaluationResult) -> bool:
        if request.is_resolved or request is not self._pending:
            return False
        self._timer.stop()
        request.result = result
        self._pending = None
        if self._state is not SessionState.FAULTED:
            self._set_state(SessionState.IDLE)
        self._wake()
        return True

    def _on_line(self, line: str) -> None:
        event = parse_line(line)

        if isinstance(event, UciOk):
            if self._awaiting_uciok:
                self._awaiting_uciok = False
                self._wake()
            return

        if self._unfinished_searches:
            # Every go is answered by exactly one bestmove, stopped or not.
            if isinstance(event, BestMove):
                self._unfinished_searches -= 1
                _LOGGER.debug("Discarding bestmove of a stopped search: %s", line)
                self._start_drained_search()
            elif isinstance(event, ScoreUpdate):
                _LOGGER.debug("Discarding score of a stopped search: %s", line)
            return

        request = self._pending
        if request is None or request.draining:
            if isinstance(event, (ScoreUpdate, BestMove)):
                _LOGGER.debug("Discarding output with no pending search: %s", line)
            return

        if isinstance(event, ScoreUpdate):
            result = normalize_score(
                event.kind,
                event.value,
                request.position.side_to_move,
            )
            if result is not None:
                request.latest = result
        elif isinstance(event, BestMove):
            self._resolve(
                request,
                request.latest or EvaluationFailed(NO_EVALUATION_REASON),
            )

    def _on_timeout(self) -> None:
        if self._awaiting_uciok:
            self._wake()
            return

        request = self._pending
        if request is None or request.is_resolved:
            return
        _LOGGER.warning(
            "Evaluation timed out for %s; stopping search", request.position.fen
        )
        if request.search_sent:
            self._unfinished_searches += 1
        self._set_state(SessionState.TIMED_OUT)
        self._send(STOP)
        self._resolve(request, EvaluationFailed(TIMEOUT_REASON))

    def _on_channel_closed(self, reason: str) -> None:
        if self._is_shutting_down or self._state is SessionState.FAULTED:
            return
        _LOGGER.error("Engine process fault: %s", reason)
        self._fault_reason = reason
        self._set_state(SessionState.FAULTED)
        request = self._pending
        if request is not None:
            self._resolve(
                request,
                EvaluationFailed(f"engine process fault: {reason}"),
            )
        self._wake()

    def _set_state(self, state: SessionState) -> None:
        if state is self._state:
            return
        self._state = state
        if self._on_state_changed is not None:
            self._on_state_changed(state)
