"""Condition matcher - recursive evaluation of condition trees."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .models import Condition, ConditionGroup, OperatorFunction
from .paths import MISSING, resolve_path
from ..runtime.trace import ExecutionTrace

logger = logging.getLogger(__name__)

COMBINATORS = ("all", "any")


def matches(
    node: Condition | ConditionGroup | list[Condition | ConditionGroup],
    facts: Mapping[str, Any],
    operators: Mapping[str, OperatorFunction],
    debug: bool = False,
    log: logging.Logger | None = None,
    trace: ExecutionTrace | None = None,
    node_id: str = "root",
) -> bool:
    """Evaluate a condition, a group, or a bare list (implicit 'all')."""
    log = log or logger

    if isinstance(node, list):
        node = ConditionGroup.model_construct(combinator="all", children=node)

    if node.kind == "group":
        return _match_group(node, facts, operators, debug, log, trace, node_id)
    return _match_condition(node, facts, operators, debug, log, trace, node_id)


def _match_group(
    group: ConditionGroup,
    facts: Mapping[str, Any],
    operators: Mapping[str, OperatorFunction],
    debug: bool,
    log: logging.Logger,
    trace: ExecutionTrace | None,
    node_id: str,
) -> bool:
    combinator = group.combinator

    if combinator not in COMBINATORS:
        if debug:
            log.warning("Unknown group combinator %r at %s", combinator, node_id)
        if trace is not None:
            trace.add_step(
                node_id=node_id,
                description=f"unknown combinator '{combinator}'",
                operator=combinator,
                result=False,
            )
        return False

    # all: stop at the first False; any: stop at the first True
    stop_on = combinator == "any"
    result = not stop_on
    for i, child in enumerate(group.children):
        child_result = matches(
            child, facts, operators, debug, log, trace, f"{node_id}.{combinator}[{i}]"
        )
        if child_result == stop_on:
            result = stop_on
            break

    if debug:
        log.debug(
            "Group %s (%s of %d) -> %s", node_id, combinator, len(group.children), result
        )
    if trace is not None:
        trace.add_step(
            node_id=node_id,
            description=f"{combinator} of {len(group.children)} condition(s)",
            operator=combinator,
            result=result,
        )
    return result


def _match_condition(
    condition: Condition,
    facts: Mapping[str, Any],
    operators: Mapping[str, OperatorFunction],
    debug: bool,
    log: logging.Logger,
    trace: ExecutionTrace | None,
    node_id: str,
) -> bool:
    fact_value = resolve_path(facts, condition.field, debug=debug, log=log)
    operator_fn = operators.get(condition.operator)

    if operator_fn is None:
        if debug:
            log.warning("Unsupported operator %r at %s", condition.operator, node_id)
        result = False
    else:
        result = bool(operator_fn(fact_value, condition.value))

    if debug:
        log.debug(
            "Condition %s: %s %s %r (fact=%r) -> %s",
            node_id, condition.field, condition.operator, condition.value, fact_value, result,
        )
    if trace is not None:
        resolved = fact_value is not MISSING
        trace.add_step(
            node_id=node_id,
            description=f"{condition.field} {condition.operator} {condition.value!r}",
            field=condition.field,
            operator=condition.operator,
            expected_value=condition.value,
            actual_value=fact_value if resolved else None,
            resolved=resolved,
            result=result,
        )
    return result
