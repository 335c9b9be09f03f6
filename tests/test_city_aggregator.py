"""Tests for edu_routes.pipeline.city_aggregator module."""

from __future__ import annotations

import logging

import pytest
import requests

from edu_routes.data.models import CityListingEntry, ListingFilter
from edu_routes.data.record_loader import RecordSourceError
from edu_routes.discovery.category_filter import keyword_predicate
from edu_routes.pipeline.city_aggregator import (
    DEFAULT_CITY_SYNONYMS,
    aggregate_cities,
    aggregate_cities_from,
    city_listing_slug,
    city_variants,
    country_variants,
    extract_city,
    parse_listing_slug,
    records_in_city,
    spelling_variants,
    synonyms_from_config,
)

MBBS = keyword_predicate("mbbs")


def _accept_all(record) -> bool:
    return True


# ======================================================================
# City extraction
# ======================================================================


class TestExtractCity:
    """City lookup through the prioritized record locations."""

    def test_city(self) -> None:
        assert extract_city({"city": "Pune"}) == "Pune"

    def test_city_name(self) -> None:
        assert extract_city({"cityName": "Nagpur"}) == "Nagpur"

    def test_location_city(self) -> None:
        assert extract_city({"location": {"city": "Indore"}}) == "Indore"

    def test_address_city(self) -> None:
        assert extract_city({"address": {"city": "Surat"}}) == "Surat"

    def test_address_city_flat(self) -> None:
        assert extract_city({"addressCity": "Kochi"}) == "Kochi"

    def test_priority_order(self) -> None:
        record = {
            "addressCity": "E",
            "address": {"city": "D"},
            "location": {"city": "C"},
            "cityName": "B",
            "city": "A",
        }
        assert extract_city(record) == "A"
        del record["city"]
        assert extract_city(record) == "B"
        del record["cityName"]
        assert extract_city(record) == "C"
        del record["location"]
        assert extract_city(record) == "D"
        del record["address"]
        assert extract_city(record) == "E"

    def test_string_location_ignored(self) -> None:
        assert extract_city({"location": "Near MG Road", "addressCity": "Agra"}) == "Agra"

    def test_blank_value_skipped(self) -> None:
        assert extract_city({"city": "  ", "cityName": "Jaipur"}) == "Jaipur"

    def test_trimmed(self) -> None:
        assert extract_city({"city": " delhi "}) == "delhi"

    def test_missing(self) -> None:
        assert extract_city({"name": "X"}) == ""


# ======================================================================
# Listing slug template and its reverse
# ======================================================================


class TestCityListingSlug:
    def test_simple(self) -> None:
        assert city_listing_slug("Pune") == "colleges-pune.html"

    def test_multi_word(self) -> None:
        assert city_listing_slug("New  Delhi") == "colleges-new-delhi.html"

    def test_accents_removed(self) -> None:
        assert city_listing_slug("São Paulo") == "colleges-sao-paulo.html"

    def test_periods_become_hyphens(self) -> None:
        assert city_listing_slug("St. Louis") == "colleges-st-louis.html"

    def test_other_punctuation_kept(self) -> None:
        # legacy shape: only the normalizer is applied, not slugify
        assert city_listing_slug("Port Blair (A&N)") == "colleges-port-blair-(a&n).html"


class TestParseListingSlug:
    def test_city(self) -> None:
        assert parse_listing_slug("colleges-new-delhi.html") == ListingFilter(type="city", value="New Delhi")

    def test_city_without_extension(self) -> None:
        assert parse_listing_slug("colleges-pune").value == "Pune"

    def test_extension_case_insensitive(self) -> None:
        assert parse_listing_slug("colleges-pune.HTML").value == "Pune"

    def test_prefix_without_hyphen(self) -> None:
        assert parse_listing_slug("collegespune").value == "Pune"

    def test_country_string(self) -> None:
        assert parse_listing_slug("abroad/bangladesh") == ListingFilter(type="country", value="Bangladesh")

    def test_country_segments(self) -> None:
        parsed = parse_listing_slug(["abroad", "united-kingdom.html"])
        assert parsed == ListingFilter(type="country", value="United Kingdom")

    def test_empty_country_falls_back_to_city(self) -> None:
        assert parse_listing_slug("abroad/").type == "city"

    def test_empty(self) -> None:
        assert parse_listing_slug("") == ListingFilter(type="city", value="")

    def test_round_trip_for_simple_names(self) -> None:
        assert parse_listing_slug(city_listing_slug("Navi Mumbai")).value == "Navi Mumbai"


# ======================================================================
# Variants and city matching
# ======================================================================


class TestVariants:
    def test_spelling_variants(self) -> None:
        assert spelling_variants("new delhi") == [
            "new delhi",
            "New Delhi",
            "NEW DELHI",
            "new-delhi",
            "new_delhi",
            "newdelhi",
        ]

    def test_raw_value_first(self) -> None:
        assert spelling_variants(" Pune ")[0] == "Pune"

    def test_empty(self) -> None:
        assert spelling_variants("  ") == []
        assert city_variants("") == []
        assert country_variants("") == []

    def test_city_synonyms(self) -> None:
        variants = city_variants("Bangalore")
        assert "Bengaluru" in variants
        assert "Bangalore Urban" in variants

    def test_no_duplicates(self) -> None:
        variants = city_variants("Delhi")
        assert len(variants) == len(set(variants))

    def test_custom_synonyms(self) -> None:
        assert "Bombay" in city_variants("Mumbai", {"mumbai": ["Bombay"]})

    def test_country_qualifiers_removed(self) -> None:
        variants = country_variants("Russian Federation")
        assert "Russian" in variants
        assert "Russian Federation" in variants

    def test_synonyms_from_config(self) -> None:
        table = synonyms_from_config({"city_synonyms": {"Mumbai": ["Bombay"], "Chennai": "Madras"}})
        assert table["mumbai"] == ("Bombay",)
        assert table["chennai"] == ("Madras",)
        assert "bangalore" in table

    def test_non_mapping_section_rejected(self) -> None:
        with pytest.raises(ValueError, match="city_synonyms"):
            synonyms_from_config({"city_synonyms": ["Bombay"]})

    def test_empty_section_keeps_defaults(self) -> None:
        assert synonyms_from_config({"city_synonyms": None}) == dict(DEFAULT_CITY_SYNONYMS)


class TestRecordsInCity:
    def test_matches_normalized_city(self) -> None:
        records = [
            {"id": 1, "city": "PUNE"},
            {"id": 2, "location": {"city": "pune."}},
            {"id": 3, "city": "Mumbai"},
        ]
        assert [r["id"] for r in records_in_city(records, "Pune")] == [1, 2]

    def test_matches_synonyms(self) -> None:
        records = [{"id": 1, "city": "Bengaluru"}, {"id": 2, "city": "Mysuru"}]
        assert [r["id"] for r in records_in_city(records, "Bangalore")] == [1]

    def test_empty_city(self) -> None:
        assert records_in_city([{"city": ""}], "") == []

    def test_non_mapping_records_skipped(self) -> None:
        assert records_in_city(["Pune", {"city": "Pune"}], "Pune") == [{"city": "Pune"}]


# ======================================================================
# Aggregation
# ======================================================================


class TestAggregateCities:
    """Filter, dedupe, sort and slug city names."""

    def test_end_to_end(self) -> None:
        records = [
            {"streams": ["MBBS"], "city": "Pune"},
            {"streams": ["MBBS"], "city": "pune"},
            {"streams": ["MBA"], "city": "Mumbai"},
        ]
        assert aggregate_cities(records, MBBS) == [
            CityListingEntry(display_name="Pune", slug="colleges-pune.html")
        ]

    def test_whitespace_and_case_collapse(self) -> None:
        records = [{"city": "Delhi"}, {"city": "delhi "}]
        entries = aggregate_cities(records, _accept_all)
        assert len(entries) == 1
        assert entries[0].display_name == "Delhi"

    def test_representative_independent_of_order(self) -> None:
        records = [{"city": "pune"}, {"city": "PUNE"}, {"city": "Pune"}]
        forward = aggregate_cities(records, _accept_all)
        backward = aggregate_cities(list(reversed(records)), _accept_all)
        assert forward == backward
        assert forward[0].display_name == "PUNE"

    def test_accent_variants_collapse(self) -> None:
        entries = aggregate_cities([{"city": "Bogotá"}, {"city": "Bogota"}], _accept_all)
        assert [e.display_name for e in entries] == ["Bogota"]

    def test_distinct_spellings_not_merged(self) -> None:
        entries = aggregate_cities([{"city": "Bangalore"}, {"city": "Bengaluru"}], _accept_all)
        assert len(entries) == 2

    def test_sorted_locale_aware(self) -> None:
        records = [{"city": c} for c in ["indore", "Agra", "Éluru", "Bhopal", "erode"]]
        names = [e.display_name for e in aggregate_cities(records, _accept_all)]
        assert names == ["Agra", "Bhopal", "Éluru", "erode", "indore"]

    def test_records_without_city_skipped(self) -> None:
        records = [{"city": ""}, {"city": " , . "}, {"name": "No City"}, {"city": "Goa"}]
        assert [e.display_name for e in aggregate_cities(records, _accept_all)] == ["Goa"]

    def test_predicate_filters(self) -> None:
        records = [
            {"city": "Pune", "description": "MBBS seats: 150"},
            {"city": "Mumbai", "streams": ["Law"]},
        ]
        assert [e.display_name for e in aggregate_cities(records, MBBS)] == ["Pune"]

    def test_city_from_nested_location(self) -> None:
        records = [{"streams": ["MBBS"], "address": {"city": "Chennai"}}]
        assert aggregate_cities(records, MBBS)[0].slug == "colleges-chennai.html"

    def test_non_mapping_records_ignored(self) -> None:
        assert aggregate_cities([None, "Pune", 3, {"city": "Pune"}], _accept_all)[0].display_name == "Pune"

    def test_empty_input(self) -> None:
        assert aggregate_cities([], MBBS) == []

    def test_records_not_mutated(self) -> None:
        records = [{"city": " Pune ", "streams": ["MBBS"]}]
        aggregate_cities(records, MBBS)
        assert records == [{"city": " Pune ", "streams": ["MBBS"]}]


class TestAggregateCitiesFrom:
    """Fetch boundary: one attempt, failures become an error value."""

    def test_success(self) -> None:
        result = aggregate_cities_from(lambda: [{"city": "Pune", "streams": ["MBBS"]}], MBBS)
        assert result.ok
        assert result.record_count == 1
        assert [e.display_name for e in result.entries] == ["Pune"]

    def test_generator_fetch(self) -> None:
        def fetch():
            yield {"city": "Pune", "streams": ["MBBS"]}
            yield {"city": "Nagpur", "streams": ["MBBS"]}

        result = aggregate_cities_from(fetch, MBBS)
        assert result.ok
        assert result.record_count == 2
        assert [e.display_name for e in result.entries] == ["Nagpur", "Pune"]

    @pytest.mark.parametrize(
        "error",
        [
            OSError("store unreachable"),
            FileNotFoundError("missing export"),
            RecordSourceError("not a list"),
            requests.ConnectionError("refused"),
        ],
    )
    def test_failure_returns_error(self, error: Exception) -> None:
        def fetch():
            raise error

        result = aggregate_cities_from(fetch, MBBS)
        assert not result.ok
        assert result.error is error
        assert result.entries == []
        assert result.record_count == 0

    def test_fetch_not_retried(self) -> None:
        calls = []

        def fetch():
            calls.append(1)
            raise OSError("down")

        aggregate_cities_from(fetch, MBBS)
        assert len(calls) == 1

    def test_failure_logged(self, caplog) -> None:
        def fetch():
            raise OSError("down")

        with caplog.at_level(logging.ERROR, logger="edu_routes"):
            aggregate_cities_from(fetch, MBBS)
        assert "Record fetch failed" in caplog.text

    def test_programming_errors_propagate(self) -> None:
        def fetch():
            raise KeyError("bug")

        with pytest.raises(KeyError):
            aggregate_cities_from(fetch, MBBS)
