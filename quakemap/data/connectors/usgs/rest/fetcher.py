"""Single-chunk fetcher for the USGS event service.

The fetcher issues exactly one request per call and reports the outcome as a
ChunkResult. It never retries and never sleeps; retry and backoff policy
belongs to the AdaptiveController.
"""

from __future__ import annotations

from time import perf_counter

from quakemap.data.connectors.usgs.config import BASE_URL, DEFAULT_TIMEOUT, RECORD_CEILING
from quakemap.data.connectors.usgs.rest.endpoints.event_query import SPEC, Adapter, EventPage
from quakemap.data.core import (
    FailureKind,
    NetworkError,
    ProviderError,
    RateLimitError,
    TooManyRecordsError,
)
from quakemap.data.models import FilterPredicate
from quakemap.data.runtime.chunking import Chunk, ChunkResult
from quakemap.data.runtime.rest import HTTPClient, RestRunner


class ChunkFetcher:
    """Fetches one chunk and classifies the outcome.

    Classification:
        - HTTP 429 -> RATE_LIMITED
        - any other non-success status -> SERVER_ERROR
        - success with reported count >= ceiling -> TOO_MANY_RECORDS
        - no response obtained -> NETWORK_ERROR
        - otherwise the parsed records (possibly empty)

    Anything else (malformed payload, programming errors) propagates.
    """

    def __init__(
        self,
        http: HTTPClient | None = None,
        *,
        base_url: str = BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        ceiling: int = RECORD_CEILING,
    ) -> None:
        self._http = http or HTTPClient(base_url=base_url, timeout=timeout)
        self._runner = RestRunner(self._http)
        self._adapter = Adapter(ceiling=ceiling)

    async def fetch(self, chunk: Chunk, filters: FilterPredicate) -> ChunkResult:
        """Fetch the records of one chunk.

        Args:
            chunk: Inclusive date range to request
            filters: Magnitude/depth bounds, forwarded unchanged

        Returns:
            ChunkResult carrying records or a classified failure
        """
        params = {"start_date": chunk.start, "end_date": chunk.end, "filters": filters}
        started = perf_counter()

        def elapsed_ms() -> float:
            return (perf_counter() - started) * 1000.0

        try:
            page: EventPage = await self._runner.run(spec=SPEC, adapter=self._adapter, params=params)
        except RateLimitError as e:
            return ChunkResult.failed(
                chunk,
                FailureKind.RATE_LIMITED,
                str(e),
                status_code=e.status_code,
                retry_after=e.retry_after,
                latency_ms=elapsed_ms(),
            )
        except TooManyRecordsError as e:
            return ChunkResult.failed(
                chunk,
                FailureKind.TOO_MANY_RECORDS,
                str(e),
                status_code=e.status_code,
                reported_count=e.count,
                latency_ms=elapsed_ms(),
            )
        except ProviderError as e:
            return ChunkResult.failed(
                chunk,
                FailureKind.SERVER_ERROR,
                str(e),
                status_code=e.status_code,
                latency_ms=elapsed_ms(),
            )
        except NetworkError as e:
            return ChunkResult.failed(
                chunk, FailureKind.NETWORK_ERROR, str(e), latency_ms=elapsed_ms()
            )

        return ChunkResult.success(
            chunk, page.records, reported_count=page.reported_count, latency_ms=elapsed_ms()
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self._runner.close()

    async def __aenter__(self) -> ChunkFetcher:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
