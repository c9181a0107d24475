"""
Runtime support for rule evaluation.

Provides:
- Execution traces explaining how an outcome was reached
- Memoized evaluation keyed by structural equality of the inputs
"""

from .trace import EvaluationResult, ExecutionTrace, RuleAttempt, TraceStep
from .cache import (
    EvaluationCache,
    MemoizedEvaluator,
    fingerprint,
    get_memoized_evaluator,
    reset_memoized_evaluator,
)

__all__ = [
    # Trace
    "EvaluationResult",
    "ExecutionTrace",
    "RuleAttempt",
    "TraceStep",
    # Cache
    "EvaluationCache",
    "MemoizedEvaluator",
    "fingerprint",
    "get_memoized_evaluator",
    "reset_memoized_evaluator",
]
