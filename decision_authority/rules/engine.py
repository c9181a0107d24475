"""Rule scanner - first-match-wins evaluation of an ordered rule set."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel

from .matcher import matches
from .models import EngineOptions, Rule, coerce_options, coerce_rules
from .operators import resolve_operators
from ..runtime.trace import EvaluationResult, ExecutionTrace

logger = logging.getLogger(__name__)

NO_MATCH = None
"""Returned by ``evaluate`` when no rule matches."""


def evaluate(
    rules: Sequence[Rule | dict[str, Any]],
    facts: Mapping[str, Any] | BaseModel,
    options: EngineOptions | dict[str, Any] | None = None,
) -> str | None:
    """Evaluate rules in order and return the action of the first match.

    Every rule is validated before the scan starts, so a malformed rule
    raises ``RuleValidationError`` without any rule having been evaluated.

    Returns:
        The matching rule's action, or NO_MATCH (None) if no rule matched.
    """
    return _scan(coerce_rules(rules), facts, coerce_options(options), trace=None).action


def evaluate_result(
    rules: Sequence[Rule | dict[str, Any]],
    facts: Mapping[str, Any] | BaseModel,
    options: EngineOptions | dict[str, Any] | None = None,
) -> EvaluationResult:
    """Evaluate like ``evaluate`` and also report the index of the matched rule."""
    return _scan(coerce_rules(rules), facts, coerce_options(options), trace=None)


def evaluate_with_trace(
    rules: Sequence[Rule | dict[str, Any]],
    facts: Mapping[str, Any] | BaseModel,
    options: EngineOptions | dict[str, Any] | None = None,
) -> EvaluationResult:
    """Evaluate like ``evaluate`` and return the outcome with a full trace."""
    return _scan(coerce_rules(rules), facts, coerce_options(options), trace=ExecutionTrace())


def _scan(
    rules: list[Rule],
    facts: Mapping[str, Any] | BaseModel,
    options: EngineOptions,
    trace: ExecutionTrace | None,
) -> EvaluationResult:
    if isinstance(facts, BaseModel):
        facts = facts.model_dump()

    operators = resolve_operators(options)
    debug = options.debug
    log = options.logger or logger

    for index, rule in enumerate(rules):
        if debug:
            log.debug("Evaluating rule %d (%s)", index, rule.label)

        matched = matches(
            rule.condition_tree(),
            facts,
            operators,
            debug=debug,
            log=log,
            trace=trace,
            node_id=f"rules[{index}]",
        )
        if trace is not None:
            trace.add_attempt(index, rule.action, matched, rule_id=rule.rule_id)

        if matched:
            if debug:
                log.debug("Rule matched at index %d: %s", index, rule.label)
            if trace is not None:
                trace.complete(rule.action, index)
            return EvaluationResult.with_action(rule.action, index, trace)

    if debug:
        log.debug("No rule matched the provided facts")
    if trace is not None:
        trace.complete()
    return EvaluationResult.no_match(trace)


class RuleEngine:
    """An ordered rule set bound to evaluation options.

    Rules are validated once, on construction.
    """

    def __init__(
        self,
        rules: Sequence[Rule | dict[str, Any]],
        options: EngineOptions | dict[str, Any] | None = None,
    ):
        self.rules = coerce_rules(rules)
        self.options = coerce_options(options)

    def evaluate(self, facts: Mapping[str, Any] | BaseModel) -> str | None:
        """Return the action of the first matching rule, or None."""
        return _scan(self.rules, facts, self.options, trace=None).action

    def explain(self, facts: Mapping[str, Any] | BaseModel) -> EvaluationResult:
        """Evaluate and return the outcome with its execution trace."""
        return _scan(self.rules, facts, self.options, trace=ExecutionTrace())
