"""Tests for YAML rule loading."""

import logging
from pathlib import Path

import pytest

from decision_authority.rules import (
    NO_MATCH,
    ConditionGroup,
    RuleLoader,
    RuleValidationError,
    evaluate,
    parse_rules,
)


SINGLE_RULE = """
rule_id: vip
conditions:
  - field: user.vip
    operator: equals
    value: true
action: upgrade
"""

RULE_LIST = """
- rule_id: first
  conditions: []
  action: a
- rule_id: second
  conditions: []
  action: b
"""


def write(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


class TestBundledRules:
    """Test the rule set shipped with the package."""

    def test_load_directory(self, rule_loader):
        rules = rule_loader.get_all_rules()
        assert [r.rule_id for r in rules] == [
            "blocked_user",
            "adult_member",
            "nordic_guest",
            "minor",
        ]

    def test_shorthand_group_is_parsed(self, rule_loader):
        rule = rule_loader.get_rule("nordic_guest")
        assert isinstance(rule.conditions, ConditionGroup)
        assert rule.conditions.combinator == "any"

    def test_get_rule(self, rule_loader):
        rule = rule_loader.get_rule("minor")
        assert rule is not None
        assert rule.action == "denyEntry"
        assert rule.description == "Minors are denied"

    def test_get_rule_not_found(self, rule_loader):
        assert rule_loader.get_rule("nonexistent") is None

    @pytest.mark.parametrize(
        "user,expected",
        [
            ({"status": "blocked", "age": 40, "role": "admin"}, "denyEntry"),
            ({"age": 30, "role": "editor"}, "allowEntry"),
            ({"age": 30, "role": "guest", "country": "sweden"}, "issueVisitorPass"),
            ({"age": 12, "role": "member"}, "denyEntry"),
            ({"age": 12, "country": "norway"}, "issueVisitorPass"),
            ({"age": 30, "role": "guest", "country": "france"}, NO_MATCH),
            ({}, NO_MATCH),
        ],
    )
    def test_decisions(self, rule_loader, user, expected):
        assert evaluate(rule_loader.get_all_rules(), {"user": user}) == expected


class TestLoadFile:
    def test_single_rule_mapping(self, tmp_path):
        loader = RuleLoader()
        rules = loader.load_file(write(tmp_path / "vip.yaml", SINGLE_RULE))

        assert len(rules) == 1
        assert rules[0].rule_id == "vip"
        assert rules[0].conditions[0].value is True

    def test_bare_list(self, tmp_path):
        loader = RuleLoader()
        rules = loader.load_file(write(tmp_path / "list.yaml", RULE_LIST))
        assert [r.action for r in rules] == ["a", "b"]

    def test_empty_file(self, tmp_path):
        loader = RuleLoader()
        assert loader.load_file(write(tmp_path / "empty.yaml", "")) == []

    def test_appends_in_load_order(self, tmp_path):
        loader = RuleLoader()
        loader.load_file(write(tmp_path / "list.yaml", RULE_LIST))
        loader.load_file(write(tmp_path / "vip.yaml", SINGLE_RULE))

        assert [r.rule_id for r in loader.get_all_rules()] == ["first", "second", "vip"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuleLoader().load_file(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = write(tmp_path / "bad.yaml", "rules: [unclosed\n")
        with pytest.raises(RuleValidationError) as exc_info:
            RuleLoader().load_file(path)
        assert exc_info.value.source == str(path)

    def test_invalid_rule_names_file_and_index(self, tmp_path):
        path = write(tmp_path / "broken.yaml", RULE_LIST + "- conditions: []\n")
        loader = RuleLoader()

        with pytest.raises(RuleValidationError) as exc_info:
            loader.load_file(path)

        assert exc_info.value.index == 2
        assert "broken.yaml" in str(exc_info.value)
        assert loader.get_all_rules() == []

    def test_scalar_document(self, tmp_path):
        with pytest.raises(RuleValidationError):
            RuleLoader().load_file(write(tmp_path / "scalar.yaml", "just a string\n"))


class TestLoadDirectory:
    def test_files_sorted_by_name(self, tmp_path):
        write(tmp_path / "20_later.yaml", "- {conditions: [], action: later}\n")
        write(tmp_path / "10_first.yml", "- {conditions: [], action: first}\n")
        write(tmp_path / "notes.txt", "not rules")

        loader = RuleLoader(tmp_path)
        rules = loader.load_directory()

        assert [r.action for r in rules] == ["first", "later"]
        assert evaluate(rules, {}) == "first"

    def test_explicit_path_overrides_rules_dir(self, tmp_path):
        write(tmp_path / "rules.yaml", RULE_LIST)
        loader = RuleLoader("/does/not/matter")
        assert len(loader.load_directory(tmp_path)) == 2

    def test_no_directory(self):
        with pytest.raises(ValueError):
            RuleLoader().load_directory()

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuleLoader(tmp_path / "missing").load_directory()

    def test_logs_summary(self, rules_dir, caplog):
        with caplog.at_level(logging.INFO):
            RuleLoader(rules_dir).load_directory()
        assert "Loaded 4 rule(s) from 1 file(s)" in caplog.text

    def test_clear(self, rule_loader):
        rule_loader.clear()
        assert rule_loader.get_all_rules() == []


class TestParseRules:
    def test_none(self):
        assert parse_rules(None) == []

    def test_rules_key(self):
        rules = parse_rules({"rules": [{"conditions": [], "action": "x"}]})
        assert rules[0].action == "x"

    def test_not_a_list(self):
        with pytest.raises(RuleValidationError) as exc_info:
            parse_rules({"rules": "x"}, source="inline")
        assert "inline" in str(exc_info.value)
