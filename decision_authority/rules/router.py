"""Routes for rule evaluation and rule inspection."""

from __future__ import annotations

import logging

from fastapi import APIRouter

from ..core.config import get_settings
from ..runtime.cache import get_memoized_evaluator, reset_memoized_evaluator
from .engine import evaluate_with_trace
from .loader import RuleLoader
from .models import EngineOptions
from .operators import operator_names
from .schemas import (
    EvaluateRequest,
    EvaluateResponse,
    OperatorsResponse,
    ReloadResponse,
    RuleInfo,
    RulesListResponse,
)

logger = logging.getLogger(__name__)

evaluate_router = APIRouter(prefix="/evaluate", tags=["Evaluation"])
rules_router = APIRouter(prefix="/rules", tags=["Rules"])

# Global instance
_loader: RuleLoader | None = None


def get_loader() -> RuleLoader:
    """Get or create the rule loader instance."""
    global _loader
    if _loader is None:
        settings = get_settings()
        _loader = RuleLoader(settings.rules_dir)
        try:
            _loader.load_directory()
        except FileNotFoundError:
            logger.warning("Rules directory not found: %s", settings.rules_dir)
    return _loader


@evaluate_router.post("", response_model=EvaluateResponse)
async def evaluate_facts(request: EvaluateRequest) -> EvaluateResponse:
    """Evaluate facts against the request's rules (or the loaded rule set).

    Returns the action of the first matching rule; ``action`` is null when
    nothing matched.
    """
    rules = request.rules if request.rules is not None else get_loader().get_all_rules()
    debug = get_settings().debug if request.debug is None else request.debug

    if request.trace:
        result = evaluate_with_trace(rules, request.facts, EngineOptions(debug=debug))
    else:
        result = get_memoized_evaluator()(rules, request.facts, debug=debug)

    return EvaluateResponse(
        action=result.action,
        matched=result.matched,
        rule_index=result.rule_index,
        trace=result.trace,
    )


@evaluate_router.post("/reload", response_model=ReloadResponse)
async def reload_rules() -> ReloadResponse:
    """Reload rules from disk and drop memoized results."""
    global _loader
    _loader = None
    reset_memoized_evaluator()

    rules = get_loader().get_all_rules()
    return ReloadResponse(status="reloaded", rules_loaded=len(rules))


@rules_router.get("", response_model=RulesListResponse)
async def list_rules() -> RulesListResponse:
    """List loaded rules in priority order."""
    rules = get_loader().get_all_rules()
    return RulesListResponse(
        rules=[
            RuleInfo(
                index=i,
                rule_id=rule.rule_id,
                action=rule.action,
                description=rule.description,
            )
            for i, rule in enumerate(rules)
        ],
        total=len(rules),
    )


@rules_router.get("/operators", response_model=OperatorsResponse)
async def list_operators() -> OperatorsResponse:
    """List the built-in operator names."""
    return OperatorsResponse(operators=operator_names())
