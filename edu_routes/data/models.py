"""Pydantic models for routing values produced from store records."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class CityListingEntry(BaseModel):
    """One city in a "colleges by city" listing."""

    model_config = ConfigDict(frozen=True)

    display_name: str
    slug: str  # e.g. "colleges-new-delhi.html"


class ListingFilter(BaseModel):
    """A listing path segment parsed back into the filter it stands for."""

    model_config = ConfigDict(frozen=True)

    type: Literal["city", "country"] = "city"
    value: str = ""


class CityAggregation(BaseModel):
    """Result of aggregating cities from a fetched record batch.

    ``error`` carries the fetch failure when the batch could not be
    obtained; ``entries`` is then empty.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    entries: list[CityListingEntry] = Field(default_factory=list)
    record_count: int = 0
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None
