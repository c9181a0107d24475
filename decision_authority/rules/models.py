"""Rule models - conditions, condition groups, rules and engine options.

Condition trees are a tagged variant: every node is either a ``Condition``
(``kind="condition"``) or a ``ConditionGroup`` (``kind="group"``). Raw
mappings are tagged once, here, by the presence of a ``field`` key, so the
matcher never has to inspect the shape of its input.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, Callable, Iterable, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    ValidationError,
    model_validator,
)

OperatorFunction = Callable[[Any, Any], bool]


class RuleValidationError(ValueError):
    """Raised when a rule or condition does not have a valid shape."""

    def __init__(self, message: str, index: int | None = None, source: str | None = None):
        super().__init__(message)
        self.index = index
        self.source = source


# =============================================================================
# Condition Tree
# =============================================================================


class Condition(BaseModel):
    """A single field/operator/value comparison."""

    kind: Literal["condition"] = "condition"
    field: str = Field(..., description="Dot-separated path into the facts (e.g. 'user.age')")
    operator: str = Field(..., description="Registered operator name (e.g. 'greaterThan')")
    value: Any = Field(None, description="Right-hand operand")


class ConditionGroup(BaseModel):
    """Logical combination (all/any) of conditions or nested groups.

    Besides the canonical ``{combinator, children}`` form, two other
    spellings are accepted on input::

        {"operator": "any", "conditions": [...]}
        {"any": [...]}
    """

    kind: Literal["group"] = "group"
    combinator: str = Field(..., description="'all' (AND) or 'any' (OR)")
    children: list[ConditionNode] = Field(..., description="Conditions or nested groups")

    @model_validator(mode="before")
    @classmethod
    def _normalize_spelling(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "combinator" in data or "children" in data:
            return data

        if "conditions" in data:
            rest = {k: v for k, v in data.items() if k not in ("operator", "conditions")}
            return {
                **rest,
                "combinator": data.get("operator", "all"),
                "children": data["conditions"],
            }

        present = [name for name in ("all", "any") if name in data]
        if len(present) > 1:
            raise ValueError("a condition group cannot declare both 'all' and 'any'")
        if present:
            name = present[0]
            rest = {k: v for k, v in data.items() if k != name}
            return {**rest, "combinator": name, "children": data[name]}

        return data


def _node_kind(value: Any) -> str | None:
    if isinstance(value, dict):
        return "condition" if "field" in value else "group"
    return getattr(value, "kind", None)


ConditionNode = Annotated[
    Union[
        Annotated[Condition, Tag("condition")],
        Annotated[ConditionGroup, Tag("group")],
    ],
    Discriminator(_node_kind),
]

ConditionGroup.model_rebuild()


# =============================================================================
# Rules
# =============================================================================


class Rule(BaseModel):
    """A prioritized rule: conditions plus the action returned on match.

    When ``conditions`` is a bare list, ``combination`` decides how the list
    is combined. A single condition or group carries its own structure and
    ``combination`` is ignored.
    """

    conditions: Union[ConditionNode, list[ConditionNode]]
    action: str
    combination: str = "all"
    rule_id: str | None = None
    description: str | None = None

    def condition_tree(self) -> Condition | ConditionGroup:
        """Return the conditions as a single tagged tree."""
        if isinstance(self.conditions, list):
            return ConditionGroup.model_construct(
                combinator=self.combination,
                children=list(self.conditions),
            )
        return self.conditions

    @property
    def label(self) -> str:
        """Identifier used in diagnostics."""
        return self.rule_id or self.action


class EngineOptions(BaseModel):
    """Per-call evaluation options."""

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    debug: bool = False
    custom_operators: dict[str, OperatorFunction] = Field(
        default_factory=dict, alias="customOperators"
    )
    logger: logging.Logger | None = None


# =============================================================================
# Validation Boundary
# =============================================================================


def coerce_rules(rules: Iterable[Rule | dict[str, Any]], source: str | None = None) -> list[Rule]:
    """Validate every rule up front.

    Raises:
        RuleValidationError: naming the index of the first malformed rule.
    """
    parsed: list[Rule] = []
    for index, rule in enumerate(rules):
        if isinstance(rule, Rule):
            parsed.append(rule)
            continue
        try:
            parsed.append(Rule.model_validate(rule))
        except ValidationError as e:
            where = f" in {source}" if source else ""
            raise RuleValidationError(
                f"Invalid rule at index {index}{where}: {e}", index=index, source=source
            ) from e
    return parsed


def coerce_options(options: EngineOptions | dict[str, Any] | None) -> EngineOptions:
    """Accept options as a model, a plain dict or None."""
    if options is None:
        return EngineOptions()
    if isinstance(options, EngineOptions):
        return options
    return EngineOptions.model_validate(options)
