"""Routing slug resolution for content records of every entity kind."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any

from edu_routes.data.records import Accessor, Record, field, first_present, is_present
from edu_routes.utils.slug import slugify


class EntityKind(str, Enum):
    """Content types that get their own routing slugs."""

    COLLEGE = "college"
    EXAM = "exam"
    SCHOLARSHIP = "scholarship"
    ARTICLE = "article"
    NEWS = "news"
    INTERNSHIP = "internship"
    JOB = "job"
    COURSE = "course"


def _company_listing(noun: str) -> Accessor:
    """Candidate name for listings posted by a company (internships, jobs).

    The position title is suffixed with the company name when both are
    known, so two companies' "Software Intern" postings get distinct slugs.
    With only a company, the name becomes ``"<company> <noun> <company>"``.
    """

    def get(record: Record) -> Any:
        company = record.get("company")
        has_company = is_present(company)

        base = first_present(record, (field("title"), field("name"), field("position")))
        if base is None and has_company:
            base = f"{company} {noun}"

        if base is not None and has_company:
            return f"{base} {company}"
        return base

    get.__name__ = f"{noun}_listing"
    return get


# Ordered candidate-name accessors per kind; the first present value wins.
CANDIDATE_NAMES: Mapping[EntityKind, tuple[Accessor, ...]] = MappingProxyType({
    EntityKind.COLLEGE: (
        field("name"),
        field("collegeName"),
        field("instituteName"),
        field("universityName"),
    ),
    EntityKind.EXAM: (
        field("name"),
        field("examName"),
        field("title"),
        field("shortName"),
    ),
    EntityKind.SCHOLARSHIP: (field("title"), field("name")),
    EntityKind.ARTICLE: (field("title"), field("name"), field("heading")),
    EntityKind.NEWS: (field("title"), field("name"), field("heading")),
    EntityKind.INTERNSHIP: (_company_listing("internship"),),
    EntityKind.JOB: (_company_listing("job"),),
    EntityKind.COURSE: (field("courseName"), field("name"), field("title")),
})


def _explicit_slug(record: Record) -> str:
    value = record.get("slug")
    if isinstance(value, str):
        return value.strip()
    return ""


def resolve_slug(kind: EntityKind | str, record: Any) -> str:
    """Resolve the routing slug for *record* of the given entity *kind*.

    Fallback chain, first non-empty result wins:
        1. An explicit ``slug`` string, trimmed and returned verbatim.
           Author-supplied slugs are authoritative and are not re-slugified.
        2. The slugified first present candidate name for *kind*
           (see :data:`CANDIDATE_NAMES`).
        3. The slugified ``id``.
        4. ``""``.

    Never raises on record content; a missing or non-mapping record
    resolves to ``""``.

    Raises:
        ValueError: If *kind* is not a known :class:`EntityKind`.
    """
    kind = EntityKind(kind)
    if not isinstance(record, Mapping):
        return ""

    explicit = _explicit_slug(record)
    if explicit:
        return explicit

    name_slug = slugify(first_present(record, CANDIDATE_NAMES[kind]))
    if name_slug:
        return name_slug

    return slugify(record.get("id"))


def get_college_slug(record: Any) -> str:
    return resolve_slug(EntityKind.COLLEGE, record)


def get_exam_slug(record: Any) -> str:
    return resolve_slug(EntityKind.EXAM, record)


def get_scholarship_slug(record: Any) -> str:
    return resolve_slug(EntityKind.SCHOLARSHIP, record)


def get_article_slug(record: Any) -> str:
    return resolve_slug(EntityKind.ARTICLE, record)


def get_news_slug(record: Any) -> str:
    return resolve_slug(EntityKind.NEWS, record)


def get_internship_slug(record: Any) -> str:
    return resolve_slug(EntityKind.INTERNSHIP, record)


def get_job_slug(record: Any) -> str:
    return resolve_slug(EntityKind.JOB, record)


def get_course_slug(record: Any) -> str:
    return resolve_slug(EntityKind.COURSE, record)
