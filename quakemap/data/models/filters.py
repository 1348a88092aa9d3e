"""User-facing filter settings.

Architecture:
    FilterSettings is the immutable snapshot of everything a user can change
    in the filter panel. UI handlers never mutate it; they derive a new
    snapshot with `updated(...)` and hand it to the feed, which resolves it
    into a Query at cycle start. An in-flight cycle therefore never observes
    later edits.

Design Decisions:
    - Presets are day counts looking back from "today" (UTC)
    - "custom" uses explicit start/end dates and requires both
    - Defaults match the initial state of the filter panel
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from ..core.exceptions import ValidationError
from .query import FilterPredicate, Query

CUSTOM_PERIOD = "custom"
DEFAULT_TIME_PERIOD_DAYS = 15


def utc_today() -> date:
    return datetime.now(UTC).date()


class FilterSettings(BaseModel):
    """Snapshot of the filter panel."""

    time_period: int | Literal["custom"] = Field(default=DEFAULT_TIME_PERIOD_DAYS)
    custom_start: date | None = None
    custom_end: date | None = None
    min_magnitude: float = Field(default=0.1, ge=-2, le=10)
    max_magnitude: float = Field(default=10, ge=-2, le=10)
    max_depth: float = Field(default=700, ge=0, le=1000)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def defaults(cls) -> FilterSettings:
        """Settings after a filter reset."""
        return cls()

    @property
    def is_custom(self) -> bool:
        return self.time_period == CUSTOM_PERIOD

    @property
    def predicate(self) -> FilterPredicate:
        return FilterPredicate(
            min_magnitude=self.min_magnitude,
            max_magnitude=self.max_magnitude,
            max_depth=self.max_depth,
        )

    def updated(self, **changes: Any) -> FilterSettings:
        """Return a validated copy with `changes` applied."""
        return type(self).model_validate({**self.model_dump(), **changes})

    def date_range(self, today: date | None = None) -> tuple[date, date]:
        """Resolve the (start, end) dates this snapshot selects.

        Raises:
            ValidationError: If a custom period is missing either date
        """
        if self.is_custom:
            if self.custom_start is None or self.custom_end is None:
                raise ValidationError("Please select both start and end dates")
            return self.custom_start, self.custom_end

        end = today or utc_today()
        return end - timedelta(days=int(self.time_period)), end

    def to_query(self, today: date | None = None) -> Query:
        """Freeze this snapshot into a Query for one retrieval cycle."""
        start, end = self.date_range(today)
        if start > end:
            raise ValidationError("Start date must not be after end date")
        return Query(start_date=start, end_date=end, filters=self.predicate)
