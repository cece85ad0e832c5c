"""Strictly sequential evaluation of an ordered list of positions."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Protocol

from chesseval.analysis.models import EvaluationFailed, EvaluationResult
from chesseval.engine.errors import EngineError

if TYPE_CHECKING:
    from chesseval.core.position import Position

_LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class PositionEvaluator(Protocol):
    """What :class:`SequentialEvaluator` needs from an engine session."""

    @property
    def is_busy(self) -> bool: ...

    def evaluate(
        self,
        position: Position,
        *,
        depth: int,
        timeout_ms: int,
    ) -> EvaluationResult: ...


class SequentialEvaluator:
    """Evaluates positions one at a time, in input order.

    ``evaluate`` returns only after its request has resolved, so request
    *i + 1* is never issued before request *i* has a result. A session that
    is still busy when the next position comes up is reported as a failure
    for that position rather than queued.
    """

    __slots__ = ("_session", "_depth", "_timeout_ms")

    def __init__(
        self,
        session: PositionEvaluator,
        *,
        depth: int,
        timeout_ms: int,
    ) -> None:
        self._session = session
        self._depth = depth
        self._timeout_ms = timeout_ms

    def evaluate_all(
        self,
        positions: Iterable[Position],
        *,
        on_progress: ProgressCallback | None = None,
    ) -> list[EvaluationResult]:
        """Return one result per position, failures included."""
        ordered = list(positions)
        total = len(ordered)
        results: list[EvaluationResult] = []

        for index, position in enumerate(ordered):
            result = self._evaluate_one(position)
            results.append(result)
            if isinstance(result, EvaluationFailed):
                _LOGGER.error(
                    "Evaluation failed for FEN %s: %s", position.fen, result.reason
                )
            else:
                _LOGGER.info("FEN: %s | Evaluation: %s", position.fen, result.text)
            if on_progress is not None:
                on_progress(index + 1, total)

        assert len(results) == total
        _LOGGER.info("Final evaluations: %s", [r.text for r in results])
        return results

    def _evaluate_one(self, position: Position) -> EvaluationResult:
        if self._session.is_busy:
            return EvaluationFailed("engine session busy with another request")
        try:
            return self._session.evaluate(
                position,
                depth=self._depth,
                timeout_ms=self._timeout_ms,
            )
        except EngineError as exc:
            return EvaluationFailed(str(exc))
