"""Group, filter and sort store records into a "colleges by city" listing.

Data flow::

    records -> category predicate -> city extraction -> normalize (dedup key)
            -> representative per key -> locale-aware sort -> listing slug
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import Any, Callable

from edu_routes.data.models import CityAggregation, CityListingEntry, ListingFilter
from edu_routes.data.records import Record, first_present, field, nested
from edu_routes.discovery.category_filter import CategoryPredicate
from edu_routes.utils.normalize import collation_key, normalize

logger = logging.getLogger(__name__)

# Where a college document may keep its city, most specific first.
CITY_FIELDS = (
    field("city"),
    field("cityName"),
    nested("location", "city"),
    nested("address", "city"),
    field("addressCity"),
)

LISTING_PREFIX = "colleges-"
LISTING_SUFFIX = ".html"
ABROAD_PREFIX = "abroad/"

# Keyed by normalized city name.
DEFAULT_CITY_SYNONYMS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "bangalore": ("Bengaluru", "Bangalore Urban"),
    "bengaluru": ("Bangalore",),
    "delhi ncr": ("Delhi", "New Delhi", "NCR Delhi", "National Capital Region"),
    "delhi": ("Delhi NCR", "New Delhi", "NCR Delhi"),
})

_COUNTRY_QUALIFIERS = re.compile(
    r"\b(republic|federation|kingdom|state|people's|people|democratic|arab|socialist)\b"
)


# ------------------------------------------------------------------
# City extraction and listing slugs
# ------------------------------------------------------------------


def extract_city(record: Record) -> str:
    """Return the record's raw city value (trimmed), or ``""`` if it has none."""
    value = first_present(record, CITY_FIELDS)
    return "" if value is None else str(value).strip()


def city_listing_slug(city: str) -> str:
    """Legacy listing path segment for *city*.

    Built from the normalized city rather than :func:`slugify` so that
    existing ``colleges-<city>.html`` links keep resolving.

    Examples:
        >>> city_listing_slug("New Delhi")
        'colleges-new-delhi.html'
        >>> city_listing_slug("São Paulo")
        'colleges-sao-paulo.html'
    """
    return LISTING_PREFIX + normalize(city).replace(" ", "-") + LISTING_SUFFIX


def _title_words(text: str) -> str:
    return " ".join(w[:1].upper() + w[1:].lower() for w in text.split("-") if w)


def parse_listing_slug(slug: str | Sequence[str]) -> ListingFilter:
    """Parse a listing path segment back into the filter it stands for.

    ``"colleges-new-delhi.html"`` is a city filter for ``"New Delhi"``;
    ``"abroad/bangladesh"`` (or ``["abroad", "bangladesh"]`` from a
    catch-all route) is a country filter for ``"Bangladesh"``.

    The recovered value is title-cased and is only an approximation of the
    stored spelling; match it against records with :func:`city_variants`.
    """
    parts = [slug] if isinstance(slug, str) else list(slug)
    joined = "/".join(parts)
    no_ext = re.sub(r"\.html$", "", joined, flags=re.IGNORECASE)

    if no_ext.lower().startswith(ABROAD_PREFIX) or (len(parts) > 1 and parts[0] == "abroad"):
        if len(parts) > 1:
            country = re.sub(r"\.html$", "", parts[1], flags=re.IGNORECASE)
        else:
            country = no_ext[len(ABROAD_PREFIX):].strip()
        if country:
            return ListingFilter(type="country", value=_title_words(country))

    city = re.sub(r"^colleges-?", "", no_ext, flags=re.IGNORECASE).strip()
    return ListingFilter(type="city", value=_title_words(city))


# ------------------------------------------------------------------
# Spelling variants
# ------------------------------------------------------------------


def spelling_variants(value: str) -> list[str]:
    """Common stored spellings of a place name, in a stable order."""
    normalized = normalize(value)
    if not normalized:
        return []
    words = normalized.split(" ")
    variants = [
        value.strip(),
        normalized,
        " ".join(w[:1].upper() + w[1:] for w in words),
        " ".join(w.upper() for w in words),
        "-".join(words),
        "_".join(words),
        "".join(words),
    ]
    return [v for v in dict.fromkeys(variants) if v]


def city_variants(
    city: str,
    synonyms: Mapping[str, Iterable[str]] | None = None,
) -> list[str]:
    """Spelling variants of *city* plus those of its known synonyms."""
    if not city:
        return []
    table = DEFAULT_CITY_SYNONYMS if synonyms is None else synonyms
    variants = spelling_variants(city)
    for synonym in table.get(normalize(city), ()):
        variants.extend(spelling_variants(synonym))
    return list(dict.fromkeys(variants))


def country_variants(country: str) -> list[str]:
    """Spelling variants of *country*, also without political qualifiers.

    ``"Russian Federation"`` additionally yields the variants of ``"Russian"``.
    """
    if not country:
        return []
    variants = spelling_variants(country)
    normalized = normalize(country)
    cleaned = " ".join(_COUNTRY_QUALIFIERS.sub("", normalized).split())
    if cleaned and cleaned != normalized:
        variants.extend(spelling_variants(cleaned))
    return list(dict.fromkeys(variants))


def synonyms_from_config(config: Mapping[str, Any] | None) -> dict[str, tuple[str, ...]]:
    """Default city synonyms extended with the config's ``city_synonyms`` section."""
    table = dict(DEFAULT_CITY_SYNONYMS)
    extra = (config or {}).get("city_synonyms") or {}
    if not isinstance(extra, Mapping):
        raise ValueError(f"'city_synonyms' must be a mapping, got {type(extra).__name__}")
    for city, names in extra.items():
        if isinstance(names, str):
            names = [names]
        table[normalize(city)] = tuple(str(n) for n in names)
    return table


def records_in_city(
    records: Iterable[Record],
    city: str,
    synonyms: Mapping[str, Iterable[str]] | None = None,
) -> list[Record]:
    """Records whose city matches *city* or one of its synonyms, in input order."""
    keys = {normalize(v) for v in city_variants(city, synonyms)}
    keys.discard("")
    if not keys:
        return []
    return [
        r for r in records
        if isinstance(r, Mapping) and normalize(extract_city(r)) in keys
    ]


# ------------------------------------------------------------------
# Aggregation
# ------------------------------------------------------------------


def aggregate_cities(
    records: Iterable[Any],
    predicate: CategoryPredicate,
) -> list[CityListingEntry]:
    """Build a deduplicated, sorted city listing from *records*.

    Records that fail *predicate* or carry no city are dropped. Cities are
    grouped by their normalized form; when several spellings share a key
    (``"Delhi"``, ``"delhi "``) the lexicographically smallest trimmed
    spelling represents the group, so the result does not depend on input
    order. Entries are sorted locale-aware by display name.

    Args:
        records: Fully materialized store documents. Non-mapping items are
            ignored.
        predicate: Category membership test, e.g.
            :func:`~edu_routes.discovery.category_filter.keyword_predicate`.

    Returns:
        A list of :class:`CityListingEntry`.
    """
    representatives: dict[str, str] = {}
    matched = 0

    for record in records:
        if not isinstance(record, Mapping) or not predicate(record):
            continue
        matched += 1

        city = extract_city(record)
        key = normalize(city)
        if not key:
            continue

        current = representatives.get(key)
        if current is None or city < current:
            representatives[key] = city

    cities = sorted(representatives.values(), key=collation_key)
    logger.debug(
        "Aggregated %d cities from %d matching records", len(cities), matched
    )
    return [
        CityListingEntry(display_name=city, slug=city_listing_slug(city))
        for city in cities
    ]


def aggregate_cities_from(
    fetch: Callable[[], Iterable[Any]],
    predicate: CategoryPredicate,
) -> CityAggregation:
    """Fetch a record batch once and aggregate it.

    A failing fetch is not retried. The failure is logged and returned as
    the aggregation's ``error`` with no entries, so callers can render an
    explicit "no results" state instead of fabricated data.
    """
    try:
        records = list(fetch())
    except (OSError, ValueError) as exc:
        # requests.RequestException is an OSError subclass
        logger.error(
            "Record fetch failed: %s", exc, extra={"error_type": type(exc).__name__}
        )
        return CityAggregation(error=exc)

    entries = aggregate_cities(records, predicate)
    logger.info(
        "City listing built",
        extra={"records": len(records), "cities": len(entries)},
    )
    return CityAggregation(entries=entries, record_count=len(records))
