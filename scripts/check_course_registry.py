#!/usr/bin/env python3
"""Compare the course vocabulary of a store export with the course registry.

The registry is a hand-maintained table; when editors add a course value to
exam documents that the table does not know, its ``/exams/<slug>`` page stops
resolving. This script lists those values together with the slug they would
most likely get.

Usage:
    python scripts/check_course_registry.py exams.json
    python scripts/check_course_registry.py exams.jsonl --field course --json
"""

from __future__ import annotations

import argparse
import json
import sys
from collections import Counter
from typing import Any, Iterable

from edu_routes.data.course_registry import CourseRegistry
from edu_routes.data.record_loader import load_records
from edu_routes.utils.slug import slugify


def course_values(records: Iterable[dict[str, Any]], field: str = "course") -> Counter:
    """Count the trimmed, non-empty values of *field* (strings or string lists)."""
    counts: Counter = Counter()
    for record in records:
        value = record.get(field)
        values = value if isinstance(value, list) else [value]
        for v in values:
            if isinstance(v, str) and v.strip():
                counts[v.strip()] += 1
    return counts


def check(records: list[dict[str, Any]], registry: CourseRegistry, field: str = "course") -> dict:
    """Split the store's course values into registered and unregistered ones.

    Returns:
        Dict with ``registered`` (name -> count), ``unregistered`` (list of
        ``{"name", "count", "suggested_slug"}`` sorted by count, descending)
        and ``unused_slugs`` (registry slugs no record refers to).
    """
    counts = course_values(records, field)
    registered = {name: n for name, n in counts.items() if registry.to_slug(name) is not None}
    unregistered = [
        {"name": name, "count": n, "suggested_slug": slugify(name)}
        for name, n in counts.most_common()
        if registry.to_slug(name) is None
    ]
    used = {registry.to_slug(name) for name in registered}
    unused = [s for s in registry.supported_slugs if s not in used and s != "overall"]
    return {
        "records": len(records),
        "registered": registered,
        "unregistered": unregistered,
        "unused_slugs": unused,
    }


def print_human_readable(result: dict) -> None:
    print(f"Records scanned: {result['records']}")
    print(f"Registered course values: {len(result['registered'])}")
    if result["unregistered"]:
        print(f"\nUnregistered course values ({len(result['unregistered'])}):")
        for item in result["unregistered"]:
            print(f"  {item['name']!r:32} x{item['count']:<5} -> {item['suggested_slug']}")
    else:
        print("\nEvery course value is registered.")
    if result["unused_slugs"]:
        print(f"\nSlugs with no matching records: {', '.join(result['unused_slugs'])}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Find course values in a store export that the course registry does not know."
    )
    parser.add_argument("source", type=str, help="Records file (JSON / JSON Lines) or URL")
    parser.add_argument("--field", type=str, default="course", help="Record field holding the course name")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    args = parser.parse_args(argv)

    try:
        records = load_records(args.source)
    except (OSError, ValueError) as exc:
        print(f"ERROR: Could not load records: {exc}", file=sys.stderr)
        return 1

    result = check(records, CourseRegistry(), field=args.field)
    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False))
    else:
        print_human_readable(result)
    return 1 if result["unregistered"] else 0


if __name__ == "__main__":
    sys.exit(main())
