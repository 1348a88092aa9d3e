"""Adaptive chunk execution.

This module provides the AdaptiveController, the state machine that drives a
chunked retrieval cycle:

    IDLE -> SPLITTING -> FETCHING -> (ADVANCING | SHRINKING) -> SPLITTING ...
         -> DONE | FATAL | CANCELLED

Every chunk starts at the cursor. A successful fetch appends its records and
moves the cursor one day past the chunk end; a classified failure keeps the
cursor where it is and retries with a smaller chunk. The cursor therefore
only moves after a confirmed success, so processed chunks tile the query
range with no gaps or overlaps.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from time import perf_counter

from ...core.cancellation import CancellationToken
from ...core.enums import RetrievalPath, RetrievalPhase
from ...core.exceptions import FatalRetrievalError, RetrievalCancelledError
from ...models import FilterPredicate, ProgressEvent, Query, compute_stats
from ...utils import invoke_callback
from .definitions import Chunk, ChunkFailure, ChunkResult, RetrievalPolicy, RetrievalResult, RetrievalState
from .planners import ONE_DAY, RangeSplitter, days_between
from .telemetry import (
    log_chunk_completed,
    log_chunk_failed,
    log_chunk_shrunk,
    log_retrieval_cancelled,
    log_retrieval_complete,
    log_retrieval_fatal,
    log_retrieval_started,
)

FetchChunk = Callable[[Chunk, FilterPredicate], Awaitable[ChunkResult]]
ProgressCallback = Callable[[ProgressEvent], Awaitable[None]] | Callable[[ProgressEvent], None]
Sleep = Callable[[float], Awaitable[None]]


class AdaptiveController:
    """Runs one query as a sequence of adaptively sized chunks.

    Chunks are fetched strictly one after another: each attempt's start and
    size depend on the outcome of the previous one.
    """

    def __init__(
        self,
        fetch_chunk: FetchChunk,
        policy: RetrievalPolicy | None = None,
        splitter: RangeSplitter | None = None,
        *,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize the controller.

        Args:
            fetch_chunk: Async function fetching one chunk (see ChunkFetcher.fetch)
            policy: Retrieval policy (default: RetrievalPolicy())
            splitter: Range splitter (default: RangeSplitter())
            sleep: Coroutine used for timed delays
        """
        self._fetch_chunk = fetch_chunk
        self._policy = policy or RetrievalPolicy()
        self._splitter = splitter or RangeSplitter()
        self._sleep = sleep

    @property
    def policy(self) -> RetrievalPolicy:
        return self._policy

    async def run(
        self,
        query: Query,
        *,
        on_progress: ProgressCallback | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> RetrievalResult:
        """Retrieve every record of `query`.

        Args:
            query: Immutable query snapshot
            on_progress: Called after every successful chunk
            cancel_token: Token checked before each fetch and after each delay

        Returns:
            RetrievalResult with records in chunk-processing order

        Raises:
            FatalRetrievalError: If an unclassified error escapes a fetch, or
                the policy's consecutive failure limit is exceeded
            RetrievalCancelledError: If the token was cancelled
        """
        token = cancel_token or CancellationToken()
        state = RetrievalState(
            cursor=query.start_date,
            chunk_size=self._policy.initial_chunk_days,
            total_days=days_between(query.start_date, query.end_date),
        )
        log_retrieval_started(
            path=RetrievalPath.CHUNKED.value,
            start_date=query.start_date,
            end_date=query.end_date,
            total_days=state.total_days,
            chunk_size=state.chunk_size,
        )
        started = perf_counter()

        try:
            while state.cursor <= query.end_date:
                state.phase = RetrievalPhase.SPLITTING
                chunk = self._splitter.next(
                    state.cursor, query.end_date, state.chunk_size, index=state.chunks_used
                )

                token.raise_if_cancelled()
                state.phase = RetrievalPhase.FETCHING
                result = await self._fetch(state, chunk, query.filters, token)
                token.raise_if_cancelled()

                if result.failure is None:
                    await self._advance(state, result, on_progress)
                    await self._pause(self._policy.inter_chunk_delay, token)
                else:
                    self._shrink(state, result.chunk, result.failure)
                    await self._pause(self._policy.failure_backoff, token)
        except RetrievalCancelledError:
            state.phase = RetrievalPhase.CANCELLED
            log_retrieval_cancelled(reason=token.reason, processed_days=state.processed_days)
            raise

        state.phase = RetrievalPhase.DONE
        outcome = RetrievalResult(
            records=state.accumulated,
            stats=compute_stats(state.accumulated),
            path=RetrievalPath.CHUNKED,
            chunks_used=state.chunks_used,
            attempts=state.attempts,
            processed_days=state.processed_days,
            total_days=state.total_days,
            chunks=tuple(state.processed),
        )
        log_retrieval_complete(result=outcome, total_latency_ms=(perf_counter() - started) * 1000.0)
        return outcome

    async def _fetch(
        self, state: RetrievalState, chunk: Chunk, filters: FilterPredicate, token: CancellationToken
    ) -> ChunkResult:
        state.attempts += 1
        try:
            return await self._fetch_chunk(chunk, filters)
        except Exception as e:
            token.raise_if_cancelled()
            state.phase = RetrievalPhase.FATAL
            log_retrieval_fatal(error_type=type(e).__name__, error_message=str(e), chunk=chunk)
            raise FatalRetrievalError(f"Unexpected error fetching {chunk.label}: {e}") from e

    async def _advance(
        self,
        state: RetrievalState,
        result: ChunkResult,
        on_progress: ProgressCallback | None,
    ) -> None:
        chunk = result.chunk
        state.phase = RetrievalPhase.ADVANCING
        state.accumulated.extend(result.records)
        state.processed_days = min(state.total_days, state.processed_days + chunk.covered_days)
        state.processed.append(chunk)
        state.chunks_used += 1
        state.consecutive_failures = 0
        state.cursor = chunk.end + ONE_DAY

        log_chunk_completed(
            chunk=chunk,
            rows_aggregated=len(result.records),
            processed_days=state.processed_days,
            latency_ms=result.latency_ms,
        )
        await invoke_callback(
            on_progress,
            ProgressEvent.for_chunk(
                chunk_start=chunk.start,
                chunk_end=chunk.end,
                processed_days=state.processed_days,
                total_days=state.total_days,
            ),
        )

    def _shrink(self, state: RetrievalState, chunk: Chunk, failure: ChunkFailure) -> None:
        state.phase = RetrievalPhase.SHRINKING
        state.failures += 1
        state.consecutive_failures += 1
        log_chunk_failed(chunk=chunk, failure=failure)

        limit = self._policy.max_consecutive_failures
        if limit is not None and state.consecutive_failures >= limit:
            state.phase = RetrievalPhase.FATAL
            message = (
                f"Giving up on chunk starting {state.cursor.isoformat()} after "
                f"{state.consecutive_failures} consecutive failures "
                f"(last: {failure.kind.value})"
            )
            log_retrieval_fatal(error_type="RetryLimitExceeded", error_message=message, chunk=chunk)
            raise FatalRetrievalError(message)

        old_size = state.chunk_size
        state.chunk_size = self._policy.shrink(old_size)
        log_chunk_shrunk(
            cursor=state.cursor,
            old_size=old_size,
            new_size=state.chunk_size,
            consecutive_failures=state.consecutive_failures,
        )

    async def _pause(self, delay: float, token: CancellationToken) -> None:
        await self._sleep(delay)
        token.raise_if_cancelled()
