"""Conversion of side-to-move engine scores into White-positive results."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from chesseval.analysis.models import CentipawnEval, EvaluationResult, MateEval
from chesseval.core.enums import Side
from chesseval.engine.protocol import ScoreKind

_ONE_DECIMAL = Decimal("0.1")


def to_white_score(raw_value: int, side_to_move: Side) -> int:
    return raw_value if side_to_move is Side.WHITE else -raw_value


def normalize_score(
    kind: ScoreKind,
    raw_value: int,
    side_to_move: Side,
) -> EvaluationResult | None:
    """Turn a raw UCI score into an absolute evaluation.

    UCI scores are relative to the side to move, so Black's scores are
    negated. Centipawns become pawns rounded half away from zero to one
    decimal; the sign of the unrounded value is kept, so ``-4`` cp renders as
    ``-0.0``. ``mate 0`` carries no distance and yields ``None``.
    """
    white_value = to_white_score(raw_value, side_to_move)

    if kind is ScoreKind.CENTIPAWNS:
        pawns = (Decimal(white_value) / 100).quantize(_ONE_DECIMAL, ROUND_HALF_UP)
        return CentipawnEval(value=pawns, centipawns=white_value)

    if white_value == 0:
        return None
    winner = Side.WHITE if white_value > 0 else Side.BLACK
    return MateEval(moves=abs(white_value), winner=winner)
