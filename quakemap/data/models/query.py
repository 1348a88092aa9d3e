"""Query and filter predicate models.

A Query is the immutable input of one retrieval cycle. The filter predicate
is passed through to the remote service unchanged.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FilterPredicate(BaseModel):
    """Numeric bounds forwarded to the event service."""

    min_magnitude: float = Field(default=0.1, ge=-2, le=10)
    max_magnitude: float = Field(default=10, ge=-2, le=10)
    max_depth: float = Field(default=700, ge=0, le=1000)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_magnitude_bounds(self) -> FilterPredicate:
        """Validate min_magnitude <= max_magnitude."""
        if self.min_magnitude > self.max_magnitude:
            raise ValueError("min_magnitude must be <= max_magnitude")
        return self


class Query(BaseModel):
    """Logical query over an inclusive date range."""

    start_date: date
    end_date: date
    filters: FilterPredicate = Field(default_factory=FilterPredicate)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_range(self) -> Query:
        """Validate start_date <= end_date."""
        if self.start_date > self.end_date:
            raise ValueError("start_date must be <= end_date")
        return self

    @property
    def days(self) -> int:
        """Whole days between start and end."""
        return (self.end_date - self.start_date).days
