"""Data models for seismic event retrieval.

Architecture:
    This module exports the Pydantic v2 models used throughout the library.
    Records, queries and filter snapshots are immutable (frozen=True) so a
    retrieval cycle can never observe changes made after it started.

Model Categories:
    - Records: EventRecord
    - Requests: Query, FilterPredicate, FilterSettings
    - Results: EventStats
    - Events: ProgressEvent
"""

from .event_record import EventRecord
from .events import ProgressEvent
from .filters import CUSTOM_PERIOD, FilterSettings
from .query import FilterPredicate, Query
from .stats import EventStats, compute_stats, find_strongest

__all__ = [
    "CUSTOM_PERIOD",
    "EventRecord",
    "EventStats",
    "FilterPredicate",
    "FilterSettings",
    "ProgressEvent",
    "Query",
    "compute_stats",
    "find_strongest",
]
