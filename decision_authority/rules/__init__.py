"""Rules domain - condition models, operators, matching and the rule scanner."""

from .models import (
    Condition,
    ConditionGroup,
    ConditionNode,
    EngineOptions,
    OperatorFunction,
    Rule,
    RuleValidationError,
    coerce_options,
    coerce_rules,
)
from .paths import MISSING, resolve_path
from .operators import BUILTIN_OPERATORS, operator_names, resolve_operators
from .matcher import matches
from .engine import (
    NO_MATCH,
    RuleEngine,
    evaluate,
    evaluate_result,
    evaluate_with_trace,
)
from .loader import RuleLoader, parse_rules

__all__ = [
    # Models
    "Condition",
    "ConditionGroup",
    "ConditionNode",
    "EngineOptions",
    "OperatorFunction",
    "Rule",
    "RuleValidationError",
    "coerce_options",
    "coerce_rules",
    # Path resolver
    "MISSING",
    "resolve_path",
    # Operator registry
    "BUILTIN_OPERATORS",
    "operator_names",
    "resolve_operators",
    # Matcher
    "matches",
    # Scanner
    "NO_MATCH",
    "RuleEngine",
    "evaluate",
    "evaluate_result",
    "evaluate_with_trace",
    # Loader
    "RuleLoader",
    "parse_rules",
]
