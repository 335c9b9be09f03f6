"""Bidirectional mapping between course URL slugs and store display names.

The display names must match the ``course`` field of the store's exam and
college documents exactly. The table is closed: a slug that is not listed
here does not resolve, and the table must be updated by hand when the
store's vocabulary changes.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from edu_routes.utils.slug import title_from_slug

OVERALL_SLUG = "overall"

DEFAULT_COURSES: Mapping[str, str] = MappingProxyType({
    "b-tech-b-e": "B.Tech / B.E.",
    "mba-pgdm": "MBA / PGDM",
    "mbbs": "MBBS",
    "llb": "LLB",
    "bba-bbm-bbs": "BBA / BBM / BBS",
    "mca-mcm": "MCA / MCM",
    "m-tech-m-e": "M.Tech / M.E.",
    "bhm": "BHM",
    "m-pharm": "M.Pharm",
    "b-arch": "B.Arch",
    "md": "MD",
    "llm": "LLM",
    "bsc": "BSc",
    "bed": "BEd",
    "msc": "MSc",
    OVERALL_SLUG: "Overall",
})


class CourseRegistry:
    """Immutable slug <-> display name table.

    The reverse table is derived from the forward one once, at
    construction. Lookups are exact string matches; callers that need
    fuzzy matching must normalize first.

    Usage::

        registry = CourseRegistry()
        registry.to_display_name("mbbs")     # "MBBS"
        registry.to_slug("B.Tech / B.E.")    # "b-tech-b-e"
        registry.to_slug("btech")            # None
    """

    def __init__(self, courses: Mapping[str, str] | None = None) -> None:
        forward = dict(DEFAULT_COURSES if courses is None else courses)
        reverse: dict[str, str] = {}
        for slug, name in forward.items():
            if not isinstance(slug, str) or not isinstance(name, str) or not slug or not name:
                raise ValueError(
                    f"Course entries must be non-empty strings, got {slug!r}: {name!r}"
                )
            if name in reverse:
                raise ValueError(
                    f"Display name {name!r} is shared by slugs "
                    f"{reverse[name]!r} and {slug!r}"
                )
            reverse[name] = slug

        self._forward: Mapping[str, str] = MappingProxyType(forward)
        self._reverse: Mapping[str, str] = MappingProxyType(reverse)

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None) -> CourseRegistry:
        """Build the default table extended with the config's ``courses`` section.

        Configured entries override shipped ones with the same slug.
        """
        courses = dict(DEFAULT_COURSES)
        extra = (config or {}).get("courses") or {}
        if not isinstance(extra, Mapping):
            raise ValueError(f"'courses' must be a mapping, got {type(extra).__name__}")
        courses.update({str(k): str(v) for k, v in extra.items()})
        return cls(courses)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def to_display_name(self, slug: str) -> str | None:
        """Return the display name for *slug*, or None if not registered."""
        return self._forward.get(slug)

    def to_slug(self, display_name: str) -> str | None:
        """Return the slug for *display_name*, or None if not registered."""
        return self._reverse.get(display_name)

    def course_label(self, slug: str) -> str:
        """Display label for *slug*, falling back to a title built from the slug."""
        return self.to_display_name(slug) or title_from_slug(slug)

    @property
    def supported_slugs(self) -> list[str]:
        """Registered slugs in table order."""
        return list(self._forward)

    @property
    def forward(self) -> Mapping[str, str]:
        return self._forward

    @property
    def reverse(self) -> Mapping[str, str]:
        return self._reverse

    def items(self) -> Iterator[tuple[str, str]]:
        return iter(self._forward.items())

    def __contains__(self, slug: object) -> bool:
        return slug in self._forward

    def __len__(self) -> int:
        return len(self._forward)

    def __repr__(self) -> str:
        return f"CourseRegistry({len(self)} courses)"


default_registry = CourseRegistry()


def to_display_name(slug: str) -> str | None:
    return default_registry.to_display_name(slug)


def to_slug(display_name: str) -> str | None:
    return default_registry.to_slug(display_name)
