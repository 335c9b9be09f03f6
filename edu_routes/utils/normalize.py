"""Free-form name normalization used as an equality and grouping key."""

from __future__ import annotations

import re
import unicodedata
from typing import Any

_COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")
_WHITESPACE = re.compile(r"\s+")


def _strip_accents(text: str) -> str:
    """Decompose *text* (NFD) and drop combining diacritical marks."""
    return _COMBINING_MARKS.sub("", unicodedata.normalize("NFD", text))


def normalize(value: Any) -> str:
    """Canonicalize a human-entered name for comparison.

    Rules, applied in order:
        - ``None`` or empty input yields ``""``
        - Lowercase
        - Canonical decomposition, then strip combining accents
        - Replace every ``.`` and ``,`` with a space
        - Collapse whitespace runs to a single space and trim

    The result is never displayed or used as a slug; two raw strings are
    "the same" city or entity iff their normalized forms are equal.

    Examples:
        >>> normalize("São Paulo")
        'sao paulo'
        >>> normalize("SAO  PAULO.")
        'sao paulo'
        >>> normalize(None)
        ''
    """
    if value is None or value == "":
        return ""

    s = _strip_accents(str(value).lower())
    s = s.replace(".", " ").replace(",", " ")
    s = _WHITESPACE.sub(" ", s)
    return s.strip()


def collation_key(value: str) -> tuple[str, str, str]:
    """Sort key approximating locale-aware (root collation) ordering.

    Primary comparison ignores case and accents, ties are broken by the
    accented case-folded form and finally by the raw string so the order
    is total.
    """
    folded = value.casefold()
    return (_strip_accents(folded), folded, value)
