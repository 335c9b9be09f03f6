"""Heuristic category membership -- decide whether a record belongs to a course category.

These predicates are deliberately coarse. The keyword search runs over the
whole serialized record, so a college that mentions "MBBS" anywhere (even in
an unrelated field) is treated as a match. False positives are accepted in
exchange for not missing colleges whose course data lives in an unexpected
field.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Callable

CategoryPredicate = Callable[[Mapping[str, Any]], bool]


def _record_text(record: Mapping[str, Any]) -> str:
    """Serialize *record* (keys included) to lowercase JSON text."""
    return json.dumps(record, default=str, ensure_ascii=False).lower()


def _streams_contain(record: Mapping[str, Any], needle: str) -> bool:
    streams = record.get("streams")
    if not isinstance(streams, list):
        return False
    return any(needle in str(stream).lower() for stream in streams)


def keyword_predicate(keyword: str) -> CategoryPredicate:
    """Build a predicate matching records that mention *keyword*.

    A record matches if its JSON text contains the keyword
    (case-insensitive), or if any element of its ``streams`` list does.
    An empty keyword matches every record.
    """
    needle = keyword.strip().lower()

    def predicate(record: Mapping[str, Any]) -> bool:
        if not needle:
            return True
        try:
            text = _record_text(record)
        except (TypeError, ValueError):
            # circular references or non-string keys
            text = str(record).lower()
        return needle in text or _streams_contain(record, needle)

    return predicate


def streams_predicate(keyword: str) -> CategoryPredicate:
    """Stricter predicate that only looks at the ``streams`` list."""
    needle = keyword.strip().lower()

    def predicate(record: Mapping[str, Any]) -> bool:
        return bool(needle) and _streams_contain(record, needle)

    return predicate


def any_of(*predicates: CategoryPredicate) -> CategoryPredicate:
    """Combine predicates; a record matches if any of them matches."""

    def predicate(record: Mapping[str, Any]) -> bool:
        return any(p(record) for p in predicates)

    return predicate
