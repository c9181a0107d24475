"""Operator registry - named binary comparisons used by conditions.

Every built-in operator is total: a type mismatch (or a MISSING fact) makes
the comparison false instead of raising. Custom operators supplied through
``EngineOptions.custom_operators`` are merged over the built-ins and wrapped
so that an exception inside one counts as a non-match.
"""

from __future__ import annotations

import functools
import logging
import operator
from collections.abc import Mapping
from decimal import Decimal
from numbers import Real
from types import MappingProxyType
from typing import Any, Callable

from .models import EngineOptions, OperatorFunction
from .paths import MISSING

logger = logging.getLogger(__name__)

_COLLECTION_TYPES = (list, tuple, set, frozenset)
_NUMBER_TYPES = (Real, Decimal)


def _is_number(value: Any) -> bool:
    return isinstance(value, _NUMBER_TYPES) and not isinstance(value, bool)


def _compare(fact: Any, value: Any, op: Callable[[Any, Any], bool]) -> bool:
    if not (_is_number(fact) and _is_number(value)):
        return False
    try:
        return bool(op(fact, value))
    except ArithmeticError:
        # Decimal NaN refuses ordering
        return False


def strict_equals(fact: Any, value: Any) -> bool:
    """Equality without coercion: True != 1 and MISSING equals nothing."""
    if fact is MISSING or value is MISSING:
        return False
    if isinstance(fact, bool) or isinstance(value, bool):
        return isinstance(fact, bool) and isinstance(value, bool) and fact is value
    try:
        return bool(fact == value)
    except Exception:
        return False


def not_equals(fact: Any, value: Any) -> bool:
    return not strict_equals(fact, value)


def greater_than(fact: Any, value: Any) -> bool:
    return _compare(fact, value, operator.gt)


def less_than(fact: Any, value: Any) -> bool:
    return _compare(fact, value, operator.lt)


def contains(fact: Any, value: Any) -> bool:
    if isinstance(fact, str):
        return isinstance(value, str) and value in fact
    if isinstance(fact, _COLLECTION_TYPES):
        return any(strict_equals(item, value) for item in fact)
    return False


def starts_with(fact: Any, value: Any) -> bool:
    return isinstance(fact, str) and isinstance(value, str) and fact.startswith(value)


def ends_with(fact: Any, value: Any) -> bool:
    return isinstance(fact, str) and isinstance(value, str) and fact.endswith(value)


def is_in(fact: Any, value: Any) -> bool:
    if not isinstance(value, _COLLECTION_TYPES):
        return False
    return any(strict_equals(fact, item) for item in value)


BUILTIN_OPERATORS: Mapping[str, OperatorFunction] = MappingProxyType({
    "equals": strict_equals,
    "notEquals": not_equals,
    "greaterThan": greater_than,
    "lessThan": less_than,
    "contains": contains,
    "startsWith": starts_with,
    "endsWith": ends_with,
    "in": is_in,
})


def _guard(name: str, func: OperatorFunction, log: logging.Logger) -> OperatorFunction:
    """Wrap a custom operator so a failure evaluates to False."""

    @functools.wraps(func)
    def guarded(fact: Any, value: Any) -> bool:
        try:
            return bool(func(fact, value))
        except Exception as e:
            log.warning(
                "Custom operator %r failed (%s: %s); treating condition as not matched",
                name, type(e).__name__, e,
            )
            return False

    return guarded


def resolve_operators(options: EngineOptions | None = None) -> Mapping[str, OperatorFunction]:
    """Return the effective operator table for a call.

    Custom operators replace same-named built-ins and extend the set with
    new names. The built-in table itself is never modified.
    """
    if options is None or not options.custom_operators:
        return BUILTIN_OPERATORS

    log = options.logger or logger
    operators = dict(BUILTIN_OPERATORS)
    for name, func in options.custom_operators.items():
        operators[name] = _guard(name, func, log)
    return operators


def operator_names(options: EngineOptions | None = None) -> list[str]:
    """List the operator names available under the given options."""
    return list(resolve_operators(options))
