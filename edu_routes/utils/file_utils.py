"""Atomic writes for generated listing files."""

from __future__ import annotations

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from edu_routes.data.models import CityListingEntry


def atomic_write_text(filepath: Path, text: str) -> None:
    """Write *text* to *filepath* so readers never see a partial file.

    The content goes to a temporary file in the target directory first and
    is then moved into place with :func:`os.replace`.
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=filepath.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_path, filepath)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def write_city_listing(
    filepath: Path,
    entries: Iterable[CityListingEntry],
    **meta: Any,
) -> Path:
    """Write a city listing as pretty-printed JSON.

    Layout::

        {"generated_at": "...", "count": 2, <meta>...,
         "cities": [{"display_name": "Pune", "slug": "colleges-pune.html"}, ...]}

    Returns:
        The written path.
    """
    cities = [entry.model_dump() for entry in entries]
    payload: dict[str, Any] = {
        "generated_at": datetime.now(tz=timezone.utc).isoformat(),
        "count": len(cities),
        **meta,
        "cities": cities,
    }
    filepath = Path(filepath)
    atomic_write_text(filepath, json.dumps(payload, indent=2, ensure_ascii=False) + "\n")
    return filepath
