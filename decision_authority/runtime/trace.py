"""
Execution tracing for rule evaluation.

Provides a structured record of how an outcome was reached, enabling:
- Explanation of why a rule did or did not match
- Debugging of condition trees and custom operators
- Audit of which rules were attempted before the first match
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class TraceStep(BaseModel):
    """A single evaluated node (condition or group)."""

    node_id: str
    """Hierarchical identifier (e.g., 'rules[0].all[1]')."""

    description: str
    """Human-readable description of what was evaluated."""

    field: str | None = None
    """The fact path that was checked (conditions only)."""

    operator: str | None = None
    """The operator or group combinator."""

    expected_value: Any = None
    """The condition value."""

    actual_value: Any = None
    """The resolved fact value (None when the path did not resolve)."""

    resolved: bool = True
    """Whether the fact path resolved to a value."""

    result: bool
    """Whether the node held."""


class RuleAttempt(BaseModel):
    """One rule tried by the scanner."""

    index: int
    rule_id: str | None = None
    action: str
    matched: bool


class ExecutionTrace(BaseModel):
    """Complete trace of a single evaluate call."""

    started_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    completed_at: str | None = None

    rules_evaluated: int = 0
    """Number of rules attempted before the scan stopped."""

    attempts: list[RuleAttempt] = Field(default_factory=list)
    steps: list[TraceStep] = Field(default_factory=list)

    matched_index: int | None = None
    action: str | None = None

    def add_step(
        self,
        node_id: str,
        description: str,
        result: bool,
        field: str | None = None,
        operator: str | None = None,
        expected_value: Any = None,
        actual_value: Any = None,
        resolved: bool = True,
    ) -> TraceStep:
        """Record an evaluated node.

        Returns:
            The created TraceStep
        """
        step = TraceStep(
            node_id=node_id,
            description=description,
            field=field,
            operator=operator,
            expected_value=expected_value,
            actual_value=actual_value,
            resolved=resolved,
            result=result,
        )
        self.steps.append(step)
        return step

    def add_attempt(self, index: int, action: str, matched: bool, rule_id: str | None = None) -> RuleAttempt:
        attempt = RuleAttempt(index=index, rule_id=rule_id, action=action, matched=matched)
        self.attempts.append(attempt)
        self.rules_evaluated = len(self.attempts)
        return attempt

    def complete(self, action: str | None = None, index: int | None = None) -> None:
        """Mark the trace as complete.

        Args:
            action: The matched action, or None when nothing matched
            index: Index of the matching rule
        """
        self.action = action
        self.matched_index = index
        self.completed_at = datetime.now(timezone.utc).isoformat()

    def steps_for_rule(self, index: int) -> list[TraceStep]:
        """Steps recorded while evaluating the rule at ``index``."""
        prefix = f"rules[{index}]"
        return [
            s for s in self.steps
            if s.node_id == prefix or s.node_id.startswith(prefix + ".")
        ]


class EvaluationResult(BaseModel):
    """Outcome of a traced evaluation."""

    action: str | None = None
    """The matched action (None when no rule matched)."""

    matched: bool = False
    rule_index: int | None = None
    trace: ExecutionTrace | None = None

    @classmethod
    def no_match(cls, trace: ExecutionTrace | None = None) -> "EvaluationResult":
        return cls(trace=trace)

    @classmethod
    def with_action(
        cls,
        action: str,
        index: int,
        trace: ExecutionTrace | None = None,
    ) -> "EvaluationResult":
        """Create a result for a matched rule.

        Args:
            action: The rule's action
            index: Position of the rule in the scanned sequence
            trace: Optional execution trace

        Returns:
            EvaluationResult with matched=True
        """
        return cls(action=action, matched=True, rule_index=index, trace=trace)
