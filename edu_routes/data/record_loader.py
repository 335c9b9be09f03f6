"""Load a materialized batch of content records from the document store export."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import requests

logger = logging.getLogger(__name__)

DEFAULT_MAX_RECORDS = 5000


class RecordSourceError(ValueError):
    """The record source answered, but not with a list of documents."""


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _extract_documents(payload: Any, source: str) -> list[Any]:
    """Accept either a bare JSON list or an export object with ``documents``."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("documents"), list):
        return payload["documents"]
    raise RecordSourceError(
        f"Expected a JSON list or an object with a 'documents' list from {source}, "
        f"got {type(payload).__name__}"
    )


def _read_file(path: Path) -> list[Any]:
    if not path.is_file():
        raise FileNotFoundError(
            f"Record source does not exist: {path}. "
            f"Export the collection as JSON or JSON Lines first."
        )

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".jsonl":
            return [json.loads(line) for line in text.splitlines() if line.strip()]
        return _extract_documents(json.loads(text), str(path))
    except json.JSONDecodeError as exc:
        raise RecordSourceError(f"Malformed JSON in {path}: {exc}") from exc


def _fetch_url(url: str, timeout: tuple[int, int]) -> list[Any]:
    response = requests.get(url, timeout=timeout, headers={"Accept": "application/json"})
    response.raise_for_status()
    try:
        payload = response.json()
    except ValueError as exc:
        raise RecordSourceError(f"Response from {url} is not JSON: {exc}") from exc
    return _extract_documents(payload, url)


def load_records(
    source: str | Path,
    max_records: int = DEFAULT_MAX_RECORDS,
    timeout: tuple[int, int] = (10, 30),
) -> list[dict[str, Any]]:
    """Load up to *max_records* store documents from *source*.

    *source* is either an ``http(s)://`` endpoint returning JSON, or a
    local file: ``.jsonl`` files hold one document per line, anything else
    is parsed as a JSON list or an object with a ``documents`` list.

    No retries and no paging: the whole batch is fetched in one request.

    Args:
        source: URL or file path.
        max_records: Cap on the number of documents returned.
        timeout: ``(connect, read)`` timeout in seconds for URL sources.

    Returns:
        The documents that are JSON objects, in source order.

    Raises:
        FileNotFoundError: If a file source does not exist.
        RecordSourceError: If the payload is not a list of documents.
        requests.RequestException: If a URL source cannot be fetched.
    """
    source_str = str(source)
    if _is_url(source_str):
        logger.info("Fetching records from %s", source_str)
        documents = _fetch_url(source_str, timeout)
    else:
        logger.info("Loading records from %s", source_str)
        documents = _read_file(Path(source))

    records: list[dict[str, Any]] = []
    skipped = 0
    for doc in documents:
        if isinstance(doc, dict):
            records.append(doc)
        else:
            skipped += 1

    if skipped:
        logger.warning("Skipped %d non-object documents from %s", skipped, source_str)

    if len(records) > max_records:
        logger.warning(
            "Record source returned %d documents, keeping the first %d",
            len(records),
            max_records,
        )
        records = records[:max_records]

    logger.info("Loaded %d records", len(records))
    return records
