"""Typed accessors over loosely structured content records.

Records come from the document store with no fixed schema. Instead of
probing them ad hoc, callers describe where a value may live as an ordered
list of :data:`Accessor` functions and take the first present value.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Iterable, Optional

Record = Mapping[str, Any]
Accessor = Callable[[Record], Optional[Any]]


def is_present(value: Any) -> bool:
    """Return True if *value* is usable as a name or identifier.

    Strings must be non-empty after trimming; numbers always count.
    Booleans, mappings, sequences and other objects never do.
    """
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, float))


def field(name: str) -> Accessor:
    """Accessor for a top-level key."""

    def get(record: Record) -> Any:
        return record.get(name)

    get.__name__ = f"field_{name}"
    return get


def nested(*path: str) -> Accessor:
    """Accessor for a dotted path such as ``location.city``.

    Returns None as soon as an intermediate value is not a mapping.
    """

    def get(record: Record) -> Any:
        current: Any = record
        for key in path:
            if not isinstance(current, Mapping):
                return None
            current = current.get(key)
        return current

    get.__name__ = "nested_" + "_".join(path)
    return get


def first_present(record: Record, accessors: Iterable[Accessor]) -> Any:
    """Return the first present value produced by *accessors*, else None."""
    for accessor in accessors:
        value = accessor(record)
        if is_present(value):
            return value
    return None
