"""Display name to URL slug conversion."""

from __future__ import annotations

import re
from typing import Any

_NON_SLUG_RUN = re.compile(r"[^a-z0-9]+")
_SLUG_SPLIT = re.compile(r"[-_]")


def _stringify(value: Any) -> str | None:
    """Return the text form of a slug source, or None if it has none."""
    if isinstance(value, str):
        return value
    # bool is an int subclass but never a meaningful name
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return None


def slugify(value: Any) -> str:
    """Convert a name, title or identifier to a URL-safe slug.

    Rules:
        - ``None`` and values that are neither strings nor numbers yield ``""``
        - Numbers are stringified without separators (``42.0`` -> ``"42"``)
        - Trim surrounding whitespace and lowercase
        - Replace every run of characters outside ``[a-z0-9]`` with a hyphen
        - Strip leading/trailing hyphens

    The result matches ``^[a-z0-9]+(-[a-z0-9]+)*$`` or is empty.

    Examples:
        >>> slugify("B.Tech / B.E.")
        'b-tech-b-e'
        >>> slugify("  AIIMS New Delhi ")
        'aiims-new-delhi'
        >>> slugify(42)
        '42'
        >>> slugify("...")
        ''
    """
    text = _stringify(value)
    if text is None:
        return ""

    s = text.strip().lower()
    s = _NON_SLUG_RUN.sub("-", s)
    return s.strip("-")


def title_from_slug(slug: str) -> str:
    """Turn a URL segment back into a readable label.

    Short tokens (three characters or fewer) are treated as acronyms.

    Examples:
        >>> title_from_slug("mba-pgdm")
        'MBA PGDM'
        >>> title_from_slug("hotel_management")
        'Hotel Management'
    """
    if not slug:
        return ""
    parts = [p for p in _SLUG_SPLIT.split(slug) if p]
    return " ".join(
        p.upper() if len(p) <= 3 else p[:1].upper() + p[1:] for p in parts
    )
