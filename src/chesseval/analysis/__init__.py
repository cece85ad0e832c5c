"""Evaluation results, score normalisation and move-list analysis APIs."""

from chesseval.analysis.evaluator import SequentialEvaluator
from chesseval.analysis.models import (
    CentipawnEval,
    EvaluationFailed,
    EvaluationResult,
    MateEval,
    is_failure,
)
from chesseval.analysis.score import normalize_score
from chesseval.analysis.service import MoveListAnalysis, MoveListAnalyzer

__all__ = [
    "CentipawnEval",
    "EvaluationFailed",
    "EvaluationResult",
    "MateEval",
    "MoveListAnalysis",
    "MoveListAnalyzer",
    "SequentialEvaluator",
    "is_failure",
    "normalize_score",
]
