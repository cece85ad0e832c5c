"""Evaluation results produced per position."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from chesseval.core.enums import Side

FAILED_TEXT = "Error"


@dataclass(slots=True, frozen=True)
class CentipawnEval:
    """White-positive evaluation in pawns, rounded to one decimal."""

    value: Decimal
    centipawns: int

    @property
    def text(self) -> str:
        return f"{self.value:+.1f}"


@dataclass(slots=True, frozen=True)
class MateEval:
    """Forced mate in ``moves`` for ``winner``."""

    moves: int
    winner: Side

    def __post_init__(self) -> None:
        if self.moves < 1:
            raise ValueError(f"Mate distance must be >= 1, got {self.moves}")

    @property
    def text(self) -> str:
        return f"Mate in {self.moves} ({self.winner} wins)"


@dataclass(slots=True, frozen=True)
class EvaluationFailed:
    """Placeholder for a position whose evaluation did not complete."""

    reason: str

    @property
    def text(self) -> str:
        return FAILED_TEXT


EvaluationResult = CentipawnEval | MateEval | EvaluationFailed


def is_failure(result: EvaluationResult) -> bool:
    return isinstance(result, EvaluationFailed)
