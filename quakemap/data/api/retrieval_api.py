"""High-level retrieval facade.

Architecture:
    RetrievalFacade is the single entry point for turning a Query into event
    records. Per request it:
    - rejects ranges longer than the policy's max_range_days before any I/O
    - routes short ranges to one direct ChunkFetcher call
    - routes longer ranges to the AdaptiveController
    - owns the loading/progress/error signalling contract

Signalling contract:
    - Single-request path: loading is shown only if the request is still
      running after `loading_delay` seconds, so fast responses never flicker.
    - Chunked path: loading is shown immediately and every progress event
      from the controller is forwarded.
    - Fatal failures replace the progress label with an error message which
      stays up for `error_dwell` seconds.
    - Loading is hidden on every exit path, success or failure, unless the
      cycle was superseded: the newer cycle owns the overlay from then on and
      a superseded cycle sends no further signals.

See Also:
    - AdaptiveController: The chunked retrieval state machine
    - ChunkFetcher: One bounded request against the event service
    - QuakeFeed: Filter-driven client that supersedes stale cycles
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from time import perf_counter

from ..connectors.usgs import ChunkFetcher
from ..core import (
    CancellationToken,
    FatalRetrievalError,
    RetrievalPath,
    ValidationError,
)
from ..models import ProgressEvent, Query, compute_stats
from ..runtime.chunking import AdaptiveController, Chunk, RetrievalPolicy, RetrievalResult, days_between
from ..runtime.chunking.telemetry import (
    log_retrieval_complete,
    log_retrieval_fatal,
    log_retrieval_started,
)
from ..utils import invoke_callback

ProgressCallback = Callable[[ProgressEvent], Awaitable[None]] | Callable[[ProgressEvent], None]
LoadingCallback = Callable[[bool], Awaitable[None]] | Callable[[bool], None]

PREPARING_MESSAGE = "Preparing to load earthquake data..."
LOADING_MESSAGE = "Loading earthquake data..."
ERROR_MESSAGE = "Error loading data. Please try again."
RANGE_TOO_LARGE_MESSAGE = "Please select a time period less than or equal to 1 year."


class RetrievalFacade:
    """Routes queries to the single or chunked path and signals progress."""

    def __init__(
        self,
        fetcher: ChunkFetcher | None = None,
        policy: RetrievalPolicy | None = None,
        *,
        on_progress: ProgressCallback | None = None,
        on_loading: LoadingCallback | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the facade.

        Args:
            fetcher: Chunk fetcher (default: ChunkFetcher against the USGS service)
            policy: Retrieval policy (default: RetrievalPolicy())
            on_progress: Progress collaborator, receives ProgressEvents
            on_loading: Loading collaborator, receives show/hide booleans
            sleep: Coroutine used for timed delays
        """
        self._fetcher = fetcher or ChunkFetcher()
        self._policy = policy or RetrievalPolicy()
        self._on_progress = on_progress
        self._on_loading = on_loading
        self._sleep = sleep
        self._controller = AdaptiveController(self._fetcher.fetch, self._policy, sleep=sleep)

    @property
    def policy(self) -> RetrievalPolicy:
        return self._policy

    def route(self, query: Query) -> RetrievalPath:
        """Path a query will take.

        Raises:
            ValidationError: If the range exceeds max_range_days
        """
        days = days_between(query.start_date, query.end_date)
        if days > self._policy.max_range_days:
            raise ValidationError(RANGE_TOO_LARGE_MESSAGE)
        if days > self._policy.chunked_threshold_days:
            return RetrievalPath.CHUNKED
        return RetrievalPath.SINGLE

    async def retrieve(
        self,
        query: Query,
        *,
        cancel_token: CancellationToken | None = None,
        show_loading: bool = True,
    ) -> RetrievalResult:
        """Retrieve all records matching `query`.

        Args:
            query: Immutable query snapshot
            cancel_token: Token a newer cycle can cancel to supersede this one
            show_loading: Whether to drive the loading collaborator at all

        Returns:
            RetrievalResult with records and summary statistics

        Raises:
            ValidationError: Range too large; raised before any network call
            FatalRetrievalError: Unrecoverable failure, after the error dwell
            RetrievalCancelledError: The cycle was superseded
        """
        path = self.route(query)
        token = cancel_token or CancellationToken()

        try:
            if path is RetrievalPath.CHUNKED:
                if show_loading:
                    await invoke_callback(self._on_loading, True)
                    await self._emit(ProgressEvent.message(PREPARING_MESSAGE))
                return await self._controller.run(
                    query,
                    on_progress=self._on_progress if show_loading else None,
                    cancel_token=token,
                )
            return await self._retrieve_single(query, token, show_loading=show_loading)
        except FatalRetrievalError:
            if show_loading and not token.cancelled:
                await self._emit(ProgressEvent.message(ERROR_MESSAGE))
                await self._sleep(self._policy.error_dwell)
            raise
        finally:
            if show_loading and not token.superseded:
                await invoke_callback(self._on_loading, False)

    async def _retrieve_single(
        self, query: Query, token: CancellationToken, *, show_loading: bool
    ) -> RetrievalResult:
        days = days_between(query.start_date, query.end_date)
        chunk = Chunk(start=query.start_date, end=query.end_date, size_hint=max(1, days))
        log_retrieval_started(
            path=RetrievalPath.SINGLE.value,
            start_date=query.start_date,
            end_date=query.end_date,
            total_days=days,
        )
        token.raise_if_cancelled()
        started = perf_counter()

        fetch = asyncio.ensure_future(self._fetcher.fetch(chunk, query.filters))
        try:
            done, _ = await asyncio.wait({fetch}, timeout=self._policy.loading_delay)
            if not done and show_loading and not token.cancelled:
                await invoke_callback(self._on_loading, True)
                await self._emit(ProgressEvent.message(LOADING_MESSAGE))
            result = await fetch
        except Exception as e:
            token.raise_if_cancelled()
            log_retrieval_fatal(error_type=type(e).__name__, error_message=str(e), chunk=chunk)
            raise FatalRetrievalError(f"Unexpected error fetching {chunk.label}: {e}") from e
        finally:
            if not fetch.done():
                fetch.cancel()

        token.raise_if_cancelled()
        failure = result.failure
        if failure is not None:
            log_retrieval_fatal(error_type=failure.kind.value, error_message=failure.message, chunk=chunk)
            raise FatalRetrievalError(failure.message)

        outcome = RetrievalResult(
            records=result.records,
            stats=compute_stats(result.records),
            path=RetrievalPath.SINGLE,
            chunks_used=1,
            attempts=1,
            processed_days=days,
            total_days=days,
            chunks=(chunk,),
        )
        log_retrieval_complete(result=outcome, total_latency_ms=(perf_counter() - started) * 1000.0)
        return outcome

    async def _emit(self, event: ProgressEvent) -> None:
        await invoke_callback(self._on_progress, event)

    async def close(self) -> None:
        """Close the fetcher's HTTP session."""
        await self._fetcher.close()

    async def __aenter__(self) -> RetrievalFacade:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()


__all__ = [
    "ERROR_MESSAGE",
    "LOADING_MESSAGE",
    "PREPARING_MESSAGE",
    "RANGE_TOO_LARGE_MESSAGE",
    "RetrievalFacade",
]
