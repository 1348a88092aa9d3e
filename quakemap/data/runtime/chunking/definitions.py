"""Chunking metadata definitions and policy structures.

This module defines the data structures used to describe adaptive chunked
retrieval: the policy that tunes it, the chunks it produces, the per-chunk
results and the aggregated outcome of a cycle.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date

from ...core.enums import FailureKind, RetrievalPath, RetrievalPhase
from ...models import EventRecord, EventStats


@dataclass(frozen=True)
class RetrievalPolicy:
    """Tuning knobs for adaptive chunked retrieval.

    Attributes:
        initial_chunk_days: Chunk size a cycle starts with
        min_chunk_days: Floor the chunk size never shrinks below
        shrink_factor: Multiplier applied to the chunk size after a failure
        failure_backoff: Seconds to wait after a failed chunk
        inter_chunk_delay: Seconds to wait after every successful chunk
        chunked_threshold_days: Ranges longer than this use the chunked path
        max_range_days: Ranges longer than this are rejected outright
        loading_delay: Seconds before the single-request path shows loading
        error_dwell: Seconds the error message stays up before cleanup
        max_consecutive_failures: Consecutive failed attempts tolerated
            before the cycle turns fatal (None = unlimited)
    """

    initial_chunk_days: int = 20
    min_chunk_days: int = 3
    shrink_factor: float = 0.7
    failure_backoff: float = 1.0
    inter_chunk_delay: float = 0.5
    chunked_threshold_days: int = 35
    max_range_days: int = 400
    loading_delay: float = 0.5
    error_dwell: float = 2.0
    max_consecutive_failures: int | None = None

    def __post_init__(self) -> None:
        """Validate policy configuration."""
        if self.min_chunk_days < 1:
            raise ValueError("min_chunk_days must be >= 1")
        if self.initial_chunk_days < self.min_chunk_days:
            raise ValueError("initial_chunk_days must be >= min_chunk_days")
        if not 0 < self.shrink_factor < 1:
            raise ValueError("shrink_factor must be between 0 and 1")
        if min(self.failure_backoff, self.inter_chunk_delay, self.loading_delay, self.error_dwell) < 0:
            raise ValueError("delays must be non-negative")
        if self.chunked_threshold_days > self.max_range_days:
            raise ValueError("chunked_threshold_days must be <= max_range_days")
        if self.max_consecutive_failures is not None and self.max_consecutive_failures < 1:
            raise ValueError("max_consecutive_failures must be >= 1 or None")

    def shrink(self, chunk_size: int) -> int:
        """Chunk size to use after a failure.

        Returns:
            max(min_chunk_days, floor(chunk_size * shrink_factor))
        """
        return max(self.min_chunk_days, math.floor(chunk_size * self.shrink_factor))


@dataclass(frozen=True)
class Chunk:
    """One bounded sub-range of a query, inclusive on both ends.

    Attributes:
        start: First day covered
        end: Last day covered
        size_hint: Chunk size (days) the range was cut with
        index: Zero-based index among the chunks of a cycle
    """

    start: date
    end: date
    size_hint: int
    index: int = 0

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError("chunk start must be <= end")
        if (self.end - self.start).days > self.size_hint:
            raise ValueError("chunk span exceeds size_hint")

    @property
    def span_days(self) -> int:
        """Whole days between start and end."""
        return (self.end - self.start).days

    @property
    def covered_days(self) -> int:
        """Calendar days covered, counting both ends."""
        return self.span_days + 1

    @property
    def label(self) -> str:
        return f"{self.start.isoformat()} to {self.end.isoformat()}"


@dataclass(frozen=True)
class ChunkFailure:
    """Classified failure of a single chunk fetch."""

    kind: FailureKind
    message: str
    status_code: int | None = None
    retry_after: float | None = None


@dataclass(frozen=True)
class ChunkResult:
    """Outcome of one chunk fetch: records or a classified failure.

    Attributes:
        chunk: Chunk that was fetched
        records: Parsed records in payload order (empty on failure)
        failure: Failure classification, None on success
        reported_count: Record count reported by the service, if any
        latency_ms: Request latency
    """

    chunk: Chunk
    records: list[EventRecord] = field(default_factory=list)
    failure: ChunkFailure | None = None
    reported_count: int | None = None
    latency_ms: float | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(
        cls,
        chunk: Chunk,
        records: list[EventRecord],
        *,
        reported_count: int | None = None,
        latency_ms: float | None = None,
    ) -> ChunkResult:
        return cls(chunk=chunk, records=records, reported_count=reported_count, latency_ms=latency_ms)

    @classmethod
    def failed(
        cls,
        chunk: Chunk,
        kind: FailureKind,
        message: str,
        *,
        status_code: int | None = None,
        retry_after: float | None = None,
        reported_count: int | None = None,
        latency_ms: float | None = None,
    ) -> ChunkResult:
        return cls(
            chunk=chunk,
            failure=ChunkFailure(
                kind=kind, message=message, status_code=status_code, retry_after=retry_after
            ),
            reported_count=reported_count,
            latency_ms=latency_ms,
        )


@dataclass
class RetrievalState:
    """Mutable state of one adaptive retrieval cycle.

    Owned exclusively by the controller running the cycle and discarded
    when it ends.
    """

    cursor: date
    chunk_size: int
    total_days: int
    accumulated: list[EventRecord] = field(default_factory=list)
    processed_days: int = 0
    phase: RetrievalPhase = RetrievalPhase.IDLE
    chunks_used: int = 0
    attempts: int = 0
    failures: int = 0
    consecutive_failures: int = 0
    processed: list[Chunk] = field(default_factory=list)


@dataclass(frozen=True)
class RetrievalResult:
    """Aggregated outcome of a completed retrieval cycle.

    Attributes:
        records: All records in chunk-processing order
        stats: Derived summary statistics
        path: Whether the single or chunked path produced the result
        chunks_used: Number of successful chunk fetches
        attempts: Number of fetch attempts, including failed ones
        processed_days: Days reported as processed
        total_days: Days in the query range
        chunks: Successfully fetched chunks in order
    """

    records: list[EventRecord]
    stats: EventStats
    path: RetrievalPath
    chunks_used: int = 1
    attempts: int = 1
    processed_days: int = 0
    total_days: int = 0
    chunks: tuple[Chunk, ...] = ()

    @property
    def total_records(self) -> int:
        return len(self.records)
