"""Summary statistics over a set of event records."""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from .event_record import EventRecord


class EventStats(BaseModel):
    """Derived statistics handed to the rendering collaborator.

    Extrema are None when there are no records; the magnitude extrema and
    `strongest` are also None when no record carries a magnitude.
    """

    count: int = 0
    max_magnitude: float | None = None
    min_magnitude: float | None = None
    min_depth: float | None = None
    max_depth: float | None = None
    strongest: EventRecord | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_empty(self) -> bool:
        return self.count == 0


def find_strongest(records: Sequence[EventRecord]) -> EventRecord | None:
    """Highest-magnitude record; the first one seen wins ties.

    Records without a magnitude are never the strongest.
    """
    strongest: EventRecord | None = None
    for record in records:
        if record.magnitude is None:
            continue
        if strongest is None or record.magnitude > strongest.magnitude:
            strongest = record
    return strongest


def compute_stats(records: Sequence[EventRecord]) -> EventStats:
    """Compute count, magnitude and depth extrema, and the strongest record.

    `count` includes records without a magnitude; the magnitude extrema only
    consider records that have one.
    """
    if not records:
        return EventStats()

    magnitudes = [r.magnitude for r in records if r.magnitude is not None]
    depths = [r.depth for r in records]
    return EventStats(
        count=len(records),
        max_magnitude=max(magnitudes, default=None),
        min_magnitude=min(magnitudes, default=None),
        min_depth=min(depths),
        max_depth=max(depths),
        strongest=find_strongest(records),
    )
