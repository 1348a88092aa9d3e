"""Chunk planning logic for determining chunk windows.

This module provides the RangeSplitter that cuts a query's date range into
successive inclusive sub-ranges. Splitting is pure and deterministic, which
is what makes the tiling of a cycle reproducible: the controller asks for one
chunk at a time with whatever chunk size it currently holds.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta

from .definitions import Chunk
from .telemetry import log_chunk_plan

ONE_DAY = timedelta(days=1)


def days_between(start: date | datetime, end: date | datetime) -> int:
    """Whole days from start to end, rounded up for partial days.

    Args:
        start: Range start
        end: Range end

    Returns:
        Ceiling of the day difference (negative if end precedes start)
    """
    if isinstance(start, datetime) != isinstance(end, datetime):
        raise TypeError("start and end must both be dates or both be datetimes")
    if isinstance(start, datetime):
        return math.ceil((end - start) / ONE_DAY)
    return (end - start).days


def next_chunk(cursor: date, end: date, size_hint: int, index: int = 0) -> Chunk:
    """Cut the next chunk starting at cursor.

    Args:
        cursor: First day of the chunk
        end: Last day of the outer range
        size_hint: Maximum day span of the chunk
        index: Chunk index to stamp on the result

    Returns:
        Chunk [cursor, min(cursor + size_hint, end)]; [cursor, cursor] when
        cursor == end

    Raises:
        ValueError: If cursor is past end or size_hint < 1
    """
    if cursor > end:
        raise ValueError("cursor must be <= end")
    if size_hint < 1:
        raise ValueError("size_hint must be >= 1")

    chunk_end = min(cursor + timedelta(days=size_hint), end)
    return Chunk(start=cursor, end=chunk_end, size_hint=size_hint, index=index)


class RangeSplitter:
    """Splits a date range into inclusive chunks.

    The splitter holds no state between calls; `next` is the step the
    adaptive controller drives, `plan` a static tiling at a fixed size.
    """

    def next(self, cursor: date, end: date, size_hint: int, index: int = 0) -> Chunk:
        """Produce the chunk starting at cursor. See `next_chunk`."""
        return next_chunk(cursor, end, size_hint, index)

    def plan(self, start: date, end: date, size_hint: int) -> list[Chunk]:
        """Tile [start, end] with chunks of a fixed size.

        Args:
            start: First day of the range
            end: Last day of the range
            size_hint: Chunk size in days

        Returns:
            Chunks in order; consecutive chunks are separated by exactly one day

        Raises:
            ValueError: If start is after end or size_hint < 1
        """
        if start > end:
            raise ValueError("start must be <= end")

        plans: list[Chunk] = []
        cursor = start
        while cursor <= end:
            chunk = self.next(cursor, end, size_hint, index=len(plans))
            plans.append(chunk)
            cursor = chunk.end + ONE_DAY

        log_chunk_plan(
            total_chunks=len(plans),
            window_size=size_hint,
            start_date=start,
            end_date=end,
        )
        return plans
