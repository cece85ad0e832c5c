"""Tests for the sequential position evaluator."""

from __future__ import annotations

from decimal import Decimal

from chesseval.analysis.evaluator import SequentialEvaluator
from chesseval.analysis.models import (
    CentipawnEval,
    EvaluationFailed,
    EvaluationResult,
)
from chesseval.core.position import STARTING_FEN, Position
from chesseval.engine.errors import EngineFaultError

_FENS = [
    STARTING_FEN,
    "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1",
    "rnbqkbnr/pppp1ppp/8/4p3/4P3/8/PPPP1PPP/RNBQKBNR w KQkq - 0 2",
    "rnbqkbnr/pppp1ppp/8/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R b KQkq - 1 2",
]


def _cp(centipawns: int) -> CentipawnEval:
    return CentipawnEval(Decimal(centipawns) / 100, centipawns)


class _StubSession:
    """Records calls and fails loudly if two requests ever overlap."""

    def __init__(self, outcomes: list[EvaluationResult | Exception]) -> None:
        self._outcomes = list(outcomes)
        self.in_flight = False
        self.busy = False
        self.calls: list[tuple[str, int, int]] = []

    @property
    def is_busy(self) -> bool:
        return self.busy or self.in_flight

    def evaluate(
        self,
        position: Position,
        *,
        depth: int,
        timeout_ms: int,
    ) -> EvaluationResult:
        assert not self.in_flight, "overlapping evaluate() calls"
        self.in_flight = True
        try:
            self.calls.append((position.fen, depth, timeout_ms))
            outcome = self._outcomes.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome
        finally:
            self.in_flight = False


def test_results_follow_input_order() -> None:
    session = _StubSession([_cp(20), _cp(-40), _cp(0), _cp(15)])
    evaluator = SequentialEvaluator(session, depth=12, timeout_ms=300)

    results = evaluator.evaluate_all(Position(fen) for fen in _FENS)

    assert [r.text for r in results] == ["+0.2", "-0.4", "+0.0", "+0.2"]
    assert [call[0] for call in session.calls] == _FENS
    assert all(call[1:] == (12, 300) for call in session.calls)


def test_failures_keep_length_and_order() -> None:
    session = _StubSession(
        [
            EvaluationFailed("timeout"),
            _cp(50),
            EngineFaultError("engine process fault: crashed"),
            EvaluationFailed("no evaluation produced"),
        ]
    )
    evaluator = SequentialEvaluator(session, depth=15, timeout_ms=5000)

    results = evaluator.evaluate_all([Position(fen) for fen in _FENS])

    assert len(results) == len(_FENS)
    assert results[0] == EvaluationFailed("timeout")
    assert results[1].text == "+0.5"
    assert results[2] == EvaluationFailed("engine process fault: crashed")
    assert results[3] == EvaluationFailed("no evaluation produced")
    assert [r.text for r in results] == ["Error", "+0.5", "Error", "Error"]


def test_busy_session_is_reported_not_queued() -> None:
    session = _StubSession([_cp(10)])
    session.busy = True
    evaluator = SequentialEvaluator(session, depth=15, timeout_ms=5000)

    results = evaluator.evaluate_all([Position(_FENS[0])])

    assert session.calls == []
    assert isinstance(results[0], EvaluationFailed)


def test_progress_reported_after_each_position() -> None:
    session = _StubSession([_cp(1), _cp(2), _cp(3)])
    evaluator = SequentialEvaluator(session, depth=15, timeout_ms=5000)
    progress: list[tuple[int, int]] = []

    evaluator.evaluate_all(
        [Position(fen) for fen in _FENS[:3]],
        on_progress=lambda done, total: progress.append((done, total)),
    )

    assert progress == [(1, 3), (2, 3), (3, 3)]


def test_empty_input() -> None:
    evaluator = SequentialEvaluator(_StubSession([]), depth=15, timeout_ms=5000)
    assert evaluator.evaluate_all([]) == []
