"""YAML rule loader and validator.

Rule order is priority order, so loading preserves it: rules keep their
order within a file, and files in a directory are read sorted by name.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from .models import Rule, RuleValidationError, coerce_rules

logger = logging.getLogger(__name__)


def parse_rules(data: Any, source: str | None = None) -> list[Rule]:
    """Validate decoded rule data.

    Accepts a list of rules, a mapping with a ``rules`` list, or a single
    rule mapping. An empty document yields no rules.
    """
    if data is None:
        return []
    if isinstance(data, dict):
        data = data["rules"] if "rules" in data else [data]
    if not isinstance(data, list):
        where = f" in {source}" if source else ""
        raise RuleValidationError(
            f"Expected a list of rules{where}, got {type(data).__name__}", source=source
        )
    return coerce_rules(data, source=source)


class RuleLoader:
    """Loads and validates YAML rules from files or directories."""

    def __init__(self, rules_dir: str | Path | None = None):
        self.rules_dir = Path(rules_dir) if rules_dir else None
        self._rules: list[Rule] = []

    def load_file(self, path: str | Path) -> list[Rule]:
        """Load rules from a single YAML file, appending them in file order."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Rule file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            try:
                content = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise RuleValidationError(f"Invalid YAML in {path}: {e}", source=str(path)) from e

        rules = parse_rules(content, source=str(path))
        self._rules.extend(rules)
        logger.debug("Loaded %d rule(s) from %s", len(rules), path)
        return rules

    def load_directory(self, path: str | Path | None = None) -> list[Rule]:
        """Load all YAML rules from a directory, files sorted by name."""
        path = Path(path) if path else self.rules_dir
        if not path:
            raise ValueError("No rules directory specified")
        if not path.exists():
            raise FileNotFoundError(f"Rules directory not found: {path}")

        files = sorted(
            p for p in path.iterdir() if p.is_file() and p.suffix in (".yaml", ".yml")
        )
        rules = []
        for yaml_file in files:
            rules.extend(self.load_file(yaml_file))

        logger.info("Loaded %d rule(s) from %d file(s) in %s", len(rules), len(files), path)
        return rules

    def get_rule(self, rule_id: str) -> Rule | None:
        """Get a loaded rule by ID."""
        for rule in self._rules:
            if rule.rule_id == rule_id:
                return rule
        return None

    def get_all_rules(self) -> list[Rule]:
        """Get all loaded rules in priority order."""
        return list(self._rules)

    def clear(self) -> None:
        self._rules = []
