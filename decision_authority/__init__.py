"""Decision Authority - first-match rule evaluation over nested facts."""

from .rules import (
    NO_MATCH,
    Condition,
    ConditionGroup,
    EngineOptions,
    Rule,
    RuleEngine,
    RuleLoader,
    RuleValidationError,
    evaluate,
    evaluate_with_trace,
)
from .runtime import EvaluationResult, ExecutionTrace, MemoizedEvaluator

__version__ = "0.1.0"

__all__ = [
    "NO_MATCH",
    "Condition",
    "ConditionGroup",
    "EngineOptions",
    "Rule",
    "RuleEngine",
    "RuleLoader",
    "RuleValidationError",
    "evaluate",
    "evaluate_with_trace",
    "EvaluationResult",
    "ExecutionTrace",
    "MemoizedEvaluator",
]
