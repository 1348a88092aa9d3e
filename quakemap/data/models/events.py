"""Progress events emitted during retrieval."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class ProgressEvent:
    """Progress update for the loading overlay."""

    percent_complete: int
    label: str
    processed_days: int = 0
    total_days: int = 0
    chunk_start: date | None = None
    chunk_end: date | None = None

    def __post_init__(self):
        if not 0 <= self.percent_complete <= 100:
            raise ValueError("percent_complete must be within 0..100")

    @classmethod
    def message(cls, label: str, percent_complete: int = 0) -> ProgressEvent:
        """Label-only event (status text, no chunk context)."""
        return cls(percent_complete=percent_complete, label=label)

    @classmethod
    def for_chunk(
        cls,
        *,
        chunk_start: date,
        chunk_end: date,
        processed_days: int,
        total_days: int,
    ) -> ProgressEvent:
        """Event emitted after a chunk has been retrieved."""
        if total_days > 0:
            percent = min(100, math.floor(processed_days / total_days * 100 + 0.5))
        else:
            percent = 100
        return cls(
            percent_complete=percent,
            label=f"Loading data from {chunk_start.isoformat()} to {chunk_end.isoformat()}",
            processed_days=processed_days,
            total_days=total_days,
            chunk_start=chunk_start,
            chunk_end=chunk_end,
        )
