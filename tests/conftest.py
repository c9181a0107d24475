"""Pytest fixtures for test suite."""

import pytest
from pathlib import Path
from typing import Any

from decision_authority.rules import RuleLoader


# =============================================================================
# Core Fixtures
# =============================================================================


@pytest.fixture
def rules_dir() -> Path:
    """Path to the bundled rules directory."""
    return Path(__file__).parent.parent / "decision_authority" / "rules" / "data"


@pytest.fixture
def rule_loader(rules_dir: Path) -> RuleLoader:
    """Rule loader with the bundled rules loaded."""
    loader = RuleLoader(rules_dir)
    loader.load_directory()
    return loader


@pytest.fixture
def entry_rules() -> list[dict[str, Any]]:
    """Single rule: named alice and older than 18."""
    return [
        {
            "conditions": [
                {"field": "user.name", "operator": "equals", "value": "alice"},
                {"field": "user.age", "operator": "greaterThan", "value": 18},
            ],
            "action": "allowEntry",
        }
    ]


@pytest.fixture
def nordic_rules() -> list[dict[str, Any]]:
    """Single rule: country is norway or sweden (combination='any')."""
    return [
        {
            "combination": "any",
            "conditions": [
                {"field": "user.country", "operator": "equals", "value": "norway"},
                {"field": "user.country", "operator": "equals", "value": "sweden"},
            ],
            "action": "allowEntry",
        }
    ]


# =============================================================================
# Call Recording
# =============================================================================


class Recorder:
    """Operator that records every call and returns a fixed result."""

    def __init__(self, result: bool = True):
        self.result = result
        self.calls: list[tuple[Any, Any]] = []

    def __call__(self, fact: Any, value: Any) -> bool:
        self.calls.append((fact, value))
        return self.result


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()
