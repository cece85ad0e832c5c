"""Move-list analysis: replay the moves, then evaluate every position."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from chesseval.analysis.evaluator import (
    PositionEvaluator,
    ProgressCallback,
    SequentialEvaluator,
)
from chesseval.analysis.models import EvaluationResult, is_failure
from chesseval.core.position import STARTING_FEN, Position
from chesseval.core.replay import IllegalMove, ReplayedMove, replay_moves


@dataclass(slots=True, frozen=True)
class MoveListAnalysis:
    """Per-position evaluations of a move list."""

    start_fen: str
    moves: tuple[ReplayedMove, ...]
    results: tuple[EvaluationResult, ...]
    rejected: tuple[IllegalMove, ...]

    @property
    def positions(self) -> tuple[Position, ...]:
        return tuple(move.position for move in self.moves)

    @property
    def texts(self) -> list[str]:
        """Display strings in position order, ``Error`` for failures."""
        return [result.text for result in self.results]

    @property
    def failure_count(self) -> int:
        return sum(1 for result in self.results if is_failure(result))


class MoveListAnalyzer:
    """Analyzes a SAN move list with one engine evaluation per position."""

    __slots__ = ("_evaluator",)

    def __init__(
        self,
        session: PositionEvaluator,
        *,
        depth: int,
        timeout_ms: int,
    ) -> None:
        self._evaluator = SequentialEvaluator(
            session, depth=depth, timeout_ms=timeout_ms
        )

    def analyze(
        self,
        moves: Iterable[str],
        *,
        start_fen: str = STARTING_FEN,
        on_progress: ProgressCallback | None = None,
    ) -> MoveListAnalysis:
        replay = replay_moves(moves, start_fen=start_fen)
        results = self._evaluator.evaluate_all(
            replay.positions, on_progress=on_progress
        )
        return MoveListAnalysis(
            start_fen=start_fen,
            moves=replay.moves,
            results=tuple(results),
            rejected=replay.rejected,
        )
