"""
Memoized evaluation keyed by structural equality.

Re-runs evaluation only when the rules, the facts or the debug flag change
by value. Inputs are reduced to a digest of their canonical JSON form, so
the cache never holds on to (or mutates) the caller's objects.
"""

from __future__ import annotations

import hashlib
import json
import threading
from typing import Any, Callable

from pydantic import BaseModel

from ..rules.models import EngineOptions, coerce_options


def _encode(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"))


def _canonical(value: Any) -> Any:
    """Reduce ``value`` to a JSON-safe form that keeps container types apart.

    Scalars stay as they are; every container and every other object is
    wrapped in a single-key tag object, so a list never collides with a
    tuple or a set, and a fallback repr never collides with a string.
    """
    if value is None or isinstance(value, (bool, str)):
        return value
    if type(value) in (int, float):
        return value
    if isinstance(value, BaseModel):
        return _canonical(value.model_dump())
    if isinstance(value, dict):
        items = [[_canonical(k), _canonical(v)] for k, v in value.items()]
        return {"__dict__": sorted(items, key=lambda kv: _encode(kv[0]))}
    if isinstance(value, list):
        return {"__list__": [_canonical(v) for v in value]}
    if isinstance(value, tuple):
        return {"__tuple__": [_canonical(v) for v in value]}
    if isinstance(value, (set, frozenset)):
        return {"__set__": sorted((_canonical(v) for v in value), key=_encode)}
    cls = type(value)
    return {"__object__": f"{cls.__module__}.{cls.__qualname__}", "repr": repr(value)}


def fingerprint(*values: Any) -> str:
    """SHA-256 of the canonical JSON encoding of ``values``.

    Deep-equal mappings produce the same digest regardless of key order.
    Values of different container types (list, tuple, set) never share a
    digest.
    """
    payload = _encode(_canonical(values))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class EvaluationCache:
    """Thread-safe in-memory store of evaluation results."""

    def __init__(self, max_size: int = 1024):
        """Initialize the cache.

        Args:
            max_size: Maximum number of results to keep
        """
        self._cache: dict[str, Any] = {}
        self._max_size = max_size
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> tuple[bool, Any]:
        """Look up a cached result.

        Returns:
            (found, result); a cached result may itself be None (no match)
        """
        with self._lock:
            if key in self._cache:
                self._hits += 1
                return True, self._cache[key]
            self._misses += 1
            return False, None

    def put(self, key: str, result: Any) -> None:
        with self._lock:
            if key not in self._cache and len(self._cache) >= self._max_size:
                self._evict()
            self._cache[key] = result

    def contains(self, key: str) -> bool:
        with self._lock:
            return key in self._cache

    def invalidate_all(self) -> int:
        """Drop every cached result.

        Returns:
            Number of results dropped
        """
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
            return count

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._cache),
                "max_size": self._max_size,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": self._hits / total if total > 0 else 0.0,
            }

    def _evict(self) -> None:
        """Evict the oldest half of the entries (FIFO)."""
        keys = list(self._cache.keys())
        for key in keys[: max(1, len(keys) // 2)]:
            del self._cache[key]


class MemoizedEvaluator:
    """Wraps an evaluator so it runs once per distinct (rules, facts, debug).

    Options other than ``debug`` (custom operators, logger) are fixed per
    instance; use a separate instance for each operator set.
    """

    def __init__(
        self,
        evaluator: Callable[..., Any] | None = None,
        options: EngineOptions | dict[str, Any] | None = None,
        max_size: int = 1024,
    ):
        if evaluator is None:
            from ..rules.engine import evaluate as evaluator
        self._evaluator = evaluator
        self.options = coerce_options(options)
        self.cache = EvaluationCache(max_size=max_size)

    def __call__(self, rules: Any, facts: Any, debug: bool | None = None) -> Any:
        debug = self.options.debug if debug is None else debug
        key = fingerprint(rules, facts, debug)

        found, result = self.cache.get(key)
        if found:
            return result

        options = self.options.model_copy(update={"debug": debug})
        result = self._evaluator(rules, facts, options)
        self.cache.put(key, result)
        return result

    def clear(self) -> int:
        return self.cache.invalidate_all()


# Global evaluator instance
_global_evaluator: MemoizedEvaluator | None = None


def get_memoized_evaluator() -> MemoizedEvaluator:
    """Get or create the process-wide memoized evaluator.

    It wraps ``evaluate_result``, so calls return an ``EvaluationResult``
    (action plus matched rule index) rather than a bare action.
    """
    global _global_evaluator
    if _global_evaluator is None:
        from ..core.config import get_settings
        from ..rules.engine import evaluate_result

        _global_evaluator = MemoizedEvaluator(
            evaluator=evaluate_result,
            max_size=get_settings().cache_max_size,
        )
    return _global_evaluator


def reset_memoized_evaluator() -> None:
    """Reset the process-wide memoized evaluator."""
    global _global_evaluator
    _global_evaluator = None
