"""Pydantic models for evaluation API requests and responses."""

from typing import Any
from pydantic import BaseModel, Field

from .models import Rule
from ..runtime.trace import ExecutionTrace


# =============================================================================
# Evaluation Models
# =============================================================================


class EvaluateRequest(BaseModel):
    """Request to evaluate facts against a rule set."""

    facts: dict[str, Any] = Field(default_factory=dict)
    rules: list[Rule] | None = Field(
        None, description="Rules to evaluate; defaults to the loaded rule set"
    )
    debug: bool | None = Field(None, description="Emit diagnostics; defaults to settings.debug")
    trace: bool = Field(False, description="Include the execution trace in the response")


class EvaluateResponse(BaseModel):
    """Outcome of an evaluation."""

    action: str | None = Field(None, description="Matched action, null when no rule matched")
    matched: bool
    rule_index: int | None = None
    trace: ExecutionTrace | None = None


class ReloadResponse(BaseModel):
    status: str
    rules_loaded: int


# =============================================================================
# Rules Models
# =============================================================================


class RuleInfo(BaseModel):
    """Summary information about a loaded rule."""

    index: int
    rule_id: str | None
    action: str
    description: str | None


class RulesListResponse(BaseModel):
    rules: list[RuleInfo]
    total: int


class OperatorsResponse(BaseModel):
    operators: list[str]
