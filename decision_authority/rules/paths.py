"""Dot-path lookup into nested fact structures."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)


class _Missing:
    """Marker for a path that does not resolve to a value."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def resolve_path(
    facts: Any,
    path: str,
    debug: bool = False,
    log: logging.Logger | None = None,
) -> Any:
    """Resolve a dotted path in a nested mapping/list structure.

    Supports mapping key lookups and numeric list indices:
        order.items.0.sku  ->  facts["order"]["items"][0]["sku"]

    Returns MISSING (never raises) when a key is absent, an index is out of
    range, or an intermediate value cannot be indexed.
    """
    current = facts
    for part in path.split("."):
        if isinstance(current, Mapping):
            current = current.get(part, MISSING)
        elif isinstance(current, (list, tuple)) and part.isdecimal():
            index = int(part)
            current = current[index] if index < len(current) else MISSING
        else:
            current = MISSING

        if current is MISSING:
            break

    if current is MISSING and debug:
        (log or logger).debug("Field %r is missing in the provided facts", path)
    return current
