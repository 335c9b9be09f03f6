"""CLI entry point for edu_routes."""

import argparse
import json
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from edu_routes.config import load_config
from edu_routes.data.course_registry import CourseRegistry
from edu_routes.data.entity_slugs import EntityKind, resolve_slug
from edu_routes.data.record_loader import load_records
from edu_routes.discovery.category_filter import keyword_predicate
from edu_routes.pipeline.city_aggregator import (
    aggregate_cities_from,
    city_variants,
    country_variants,
    parse_listing_slug,
    synonyms_from_config,
)
from edu_routes.utils.file_utils import write_city_listing
from edu_routes.utils.logging_setup import setup_logging
from edu_routes.utils.normalize import normalize
from edu_routes.utils.slug import slugify


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="edu_routes",
        description="Resolve routing slugs and build city listings for the education directory",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- slug command ---
    slug_parser = subparsers.add_parser("slug", help="Resolve the routing slug of content records")
    slug_parser.add_argument("kind", choices=[k.value for k in EntityKind], help="Entity kind")
    source = slug_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--record", type=str, help="A single record as a JSON object")
    source.add_argument("--file", type=Path, help="JSON / JSON Lines file of records")

    # --- slugify / normalize commands ---
    slugify_parser = subparsers.add_parser("slugify", help="Slugify a value")
    slugify_parser.add_argument("value", type=str)
    normalize_parser = subparsers.add_parser("normalize", help="Show the normalized form of a value")
    normalize_parser.add_argument("value", type=str)

    # --- course command ---
    course_parser = subparsers.add_parser("course", help="Look up the course registry")
    lookup = course_parser.add_mutually_exclusive_group(required=True)
    lookup.add_argument("--slug", type=str, help="Course slug to translate to a display name")
    lookup.add_argument("--name", type=str, help="Display name to translate to a course slug")
    lookup.add_argument("--list", action="store_true", help="List every registered course")
    course_parser.add_argument("--config", type=Path, help="Path to config YAML file")

    # --- cities command ---
    cities_parser = subparsers.add_parser("cities", help="Build a colleges-by-city listing")
    cities_parser.add_argument("--source", type=str, help="Records file or URL")
    cities_parser.add_argument("--keyword", type=str, help="Category keyword (default: mbbs)")
    cities_parser.add_argument("--config", type=Path, help="Path to config YAML file")
    cities_parser.add_argument(
        "--output", type=Path,
        help="Listing JSON file; relative paths go under output_dir (default: <keyword>-cities.json)",
    )
    cities_parser.add_argument("--json", action="store_true", help="Print the listing as JSON")
    cities_parser.add_argument(
        "--log-format", choices=["json", "text"], default="json", help="Console log format (default: json)"
    )

    # --- parse-listing command ---
    parse_parser = subparsers.add_parser("parse-listing", help="Parse a listing path segment")
    parse_parser.add_argument("slug", type=str, help='e.g. "colleges-new-delhi.html" or "abroad/nepal"')
    parse_parser.add_argument("--config", type=Path, help="Path to config YAML file")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "slug":
        return cmd_slug(args)
    elif args.command == "slugify":
        print(slugify(args.value))
        return 0
    elif args.command == "normalize":
        print(normalize(args.value))
        return 0
    elif args.command == "course":
        return cmd_course(args)
    elif args.command == "cities":
        return cmd_cities(args)
    elif args.command == "parse-listing":
        return cmd_parse_listing(args)

    return 0


def cmd_slug(args) -> int:
    """Print the resolved slug for one record, or one line per record of a file."""
    if args.record is not None:
        try:
            record = json.loads(args.record)
        except json.JSONDecodeError as e:
            print(f"Invalid JSON record: {e}")
            return 1
        print(resolve_slug(args.kind, record))
        return 0

    try:
        records = load_records(args.file)
    except (OSError, ValueError) as e:
        print(f"Could not load records: {e}")
        return 1

    for record in records:
        print(f"{record.get('id', '')}\t{resolve_slug(args.kind, record)}")
    return 0


def cmd_course(args) -> int:
    """Translate between course slugs and display names."""
    config = load_config(config_path=getattr(args, "config", None))
    try:
        registry = CourseRegistry.from_config(config)
    except ValueError as e:
        print(f"Invalid course table: {e}")
        return 1

    if args.list:
        table = Table(title=f"Courses ({len(registry)})")
        table.add_column("Slug", style="bold cyan")
        table.add_column("Display name")
        for slug, name in registry.items():
            table.add_row(slug, name)
        Console().print(table)
        return 0

    if args.slug is not None:
        result = registry.to_display_name(args.slug)
        missing = f"Unknown course slug: {args.slug}"
    else:
        result = registry.to_slug(args.name)
        missing = f"Unknown course name: {args.name}"

    if result is None:
        print(missing)
        return 1
    print(result)
    return 0


def cmd_cities(args) -> int:
    """Aggregate a city listing from the configured record source."""
    config = load_config(
        config_path=getattr(args, "config", None),
        cli_overrides={
            "records_source": args.source,
            "category_keyword": args.keyword,
        },
    )
    setup_logging(
        level=config.get("logging", {}).get("level", "INFO"),
        json_console=args.log_format == "json",
    )

    source = config.get("records_source")
    if not source:
        print("No record source configured. Pass --source or set RECORDS_SOURCE.")
        return 1

    keyword = config.get("category_keyword", "mbbs")
    max_records = int(config.get("max_records", 5000))

    aggregation = aggregate_cities_from(
        lambda: load_records(source, max_records=max_records),
        keyword_predicate(keyword),
    )
    if not aggregation.ok:
        print(f"Could not load records: {aggregation.error}")
        return 1

    output = args.output or Path(f"{slugify(keyword) or 'all'}-cities.json")
    if not output.is_absolute():
        output = Path(config.get("output_dir", "./output")) / output
    path = write_city_listing(output, aggregation.entries, keyword=keyword, source=str(source))
    print(f"Wrote {len(aggregation.entries)} cities to {path}", file=sys.stderr)

    if args.json:
        print(json.dumps([e.model_dump() for e in aggregation.entries], indent=2, ensure_ascii=False))
        return 0

    if not aggregation.entries:
        print("No cities found.")
        return 0

    table = Table(title=f"{keyword.upper()} colleges by city ({len(aggregation.entries)})")
    table.add_column("City", style="bold")
    table.add_column("Slug", style="cyan")
    for entry in aggregation.entries:
        table.add_row(entry.display_name, entry.slug)
    Console().print(table)
    return 0


def cmd_parse_listing(args) -> int:
    """Show the filter a listing path segment stands for and its query variants."""
    listing = parse_listing_slug(args.slug)
    if not listing.value:
        print(f"No {listing.type} in listing slug: {args.slug}")
        return 1

    if listing.type == "country":
        variants = country_variants(listing.value)
    else:
        config = load_config(config_path=getattr(args, "config", None))
        try:
            synonyms = synonyms_from_config(config)
        except ValueError as e:
            print(f"Invalid city synonyms: {e}")
            return 1
        variants = city_variants(listing.value, synonyms)

    print(f"{listing.type}: {listing.value}")
    for variant in variants:
        print(f"  - {variant}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
