"""Adaptive chunking layer for date-ranged event queries.

This module turns one logical query over a date range into a sequence of
bounded sub-queries, sized dynamically to stay under the service's
per-request record ceiling.

Architecture:
    The chunking layer consists of:
    - definitions.py: Policy, chunk, per-chunk result and cycle result structures
    - planners.py: Range splitting (determines chunk windows)
    - executors.py: Adaptive controller (fetches, shrinks, aggregates)
    - telemetry.py: Structured logging
"""

from __future__ import annotations

from .definitions import (
    Chunk,
    ChunkFailure,
    ChunkResult,
    RetrievalPolicy,
    RetrievalResult,
    RetrievalState,
)
from .executors import AdaptiveController
from .planners import RangeSplitter, days_between, next_chunk

__all__ = [
    "AdaptiveController",
    "Chunk",
    "ChunkFailure",
    "ChunkResult",
    "RangeSplitter",
    "RetrievalPolicy",
    "RetrievalResult",
    "RetrievalState",
    "days_between",
    "next_chunk",
]
