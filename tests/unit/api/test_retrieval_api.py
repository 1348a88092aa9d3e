"""Unit tests for RetrievalFacade routing and signalling."""

from __future__ import annotations

import asyncio
from datetime import date, timedelta

import pytest

from quakemap.data.api import (
    ERROR_MESSAGE,
    LOADING_MESSAGE,
    PREPARING_MESSAGE,
    RetrievalFacade,
)
from quakemap.data.core import (
    CancellationToken,
    FailureKind,
    FatalRetrievalError,
    RetrievalCancelledError,
    RetrievalPath,
    ValidationError,
)
from quakemap.data.models import Query
from quakemap.data.runtime.chunking import ChunkResult, RetrievalPolicy

START = date(2024, 1, 1)


def query_of(days: int) -> Query:
    return Query(start_date=START, end_date=START + timedelta(days=days))


class Signals:
    """Collects progress and loading signals in arrival order."""

    def __init__(self) -> None:
        self.log: list[tuple[str, object]] = []

    def progress(self, event) -> None:
        self.log.append(("progress", event))

    def loading(self, visible: bool) -> None:
        self.log.append(("loading", visible))

    @property
    def loading_calls(self) -> list[bool]:
        return [value for kind, value in self.log if kind == "loading"]

    @property
    def labels(self) -> list[str]:
        return [value.label for kind, value in self.log if kind == "progress"]


def make_facade(fetcher, sleeper, signals=None, policy=None) -> RetrievalFacade:
    signals = signals or Signals()
    return RetrievalFacade(
        fetcher,
        policy,
        on_progress=signals.progress,
        on_loading=signals.loading,
        sleep=sleeper,
    )


class TestRouting:
    """Test range validation and path selection."""

    @pytest.mark.parametrize("days", [0, 1, 15, 35])
    @pytest.mark.asyncio
    async def test_short_range_single_request(self, scripted_fetcher, sleeper, days):
        """Test ranges up to 35 days issue exactly one full-range fetch."""
        fetcher = scripted_fetcher()
        facade = make_facade(fetcher, sleeper)
        query = query_of(days)

        result = await facade.retrieve(query)

        assert len(fetcher.calls) == 1
        assert (fetcher.calls[0].start, fetcher.calls[0].end) == (query.start_date, query.end_date)
        assert result.path is RetrievalPath.SINGLE

    @pytest.mark.parametrize("days", [36, 60, 400])
    @pytest.mark.asyncio
    async def test_long_range_chunked(self, scripted_fetcher, sleeper, days):
        """Test ranges over 35 days take the chunked path."""
        fetcher = scripted_fetcher()
        facade = make_facade(fetcher, sleeper)

        result = await facade.retrieve(query_of(days))

        assert result.path is RetrievalPath.CHUNKED
        assert len(fetcher.calls) > 1
        assert result.chunks[-1].end == START + timedelta(days=days)

    @pytest.mark.parametrize("days", [401, 730])
    @pytest.mark.asyncio
    async def test_range_too_large_rejected_without_fetch(self, scripted_fetcher, sleeper, days):
        """Test ranges over 400 days raise ValidationError before any fetch."""
        fetcher = scripted_fetcher()
        signals = Signals()
        facade = make_facade(fetcher, sleeper, signals)

        with pytest.raises(ValidationError, match="less than or equal to 1 year"):
            await facade.retrieve(query_of(days))

        assert fetcher.calls == []
        assert signals.log == []

    def test_route(self, scripted_fetcher, sleeper):
        """Test route() reports the chosen path."""
        facade = make_facade(scripted_fetcher(), sleeper)
        assert facade.route(query_of(35)) is RetrievalPath.SINGLE
        assert facade.route(query_of(36)) is RetrievalPath.CHUNKED


class TestLoadingSignals:
    """Test the loading/progress contract."""

    @pytest.mark.asyncio
    async def test_fast_single_request_never_shows_loading(self, scripted_fetcher, sleeper):
        """Test a fast single request only hides loading."""
        signals = Signals()
        facade = make_facade(scripted_fetcher(), sleeper, signals)

        await facade.retrieve(query_of(10))

        assert signals.loading_calls == [False]
        assert signals.labels == []

    @pytest.mark.asyncio
    async def test_slow_single_request_shows_loading(self, sleeper):
        """Test loading appears once the single request outlasts loading_delay."""

        class SlowFetcher:
            async def fetch(self, chunk, filters):
                await asyncio.sleep(0.05)
                return ChunkResult.success(chunk, [])

            async def close(self):
                pass

        signals = Signals()
        policy = RetrievalPolicy(loading_delay=0.01)
        facade = make_facade(SlowFetcher(), sleeper, signals, policy)

        await facade.retrieve(query_of(10))

        assert signals.loading_calls == [True, False]
        assert signals.labels == [LOADING_MESSAGE]

    @pytest.mark.asyncio
    async def test_chunked_shows_loading_immediately(self, scripted_fetcher, sleeper):
        """Test chunked retrieval shows loading first and forwards progress."""
        signals = Signals()
        facade = make_facade(scripted_fetcher(), sleeper, signals)

        await facade.retrieve(Query(start_date=date(2024, 1, 1), end_date=date(2024, 3, 1)))

        assert signals.log[0] == ("loading", True)
        assert signals.labels[0] == PREPARING_MESSAGE
        progress = [value for kind, value in signals.log if kind == "progress"][1:]
        assert len(progress) == 3
        assert progress[-1].percent_complete == 100
        assert signals.log[-1] == ("loading", False)

    @pytest.mark.asyncio
    async def test_show_loading_false_is_silent(self, scripted_fetcher, sleeper):
        """Test show_loading=False sends no signals at all."""
        signals = Signals()
        facade = make_facade(scripted_fetcher(), sleeper, signals)

        await facade.retrieve(query_of(60), show_loading=False)

        assert signals.log == []


class TestFatalHandling:
    """Test error surfacing and cleanup."""

    @pytest.mark.asyncio
    async def test_single_request_failure_is_fatal(self, scripted_fetcher, sleeper):
        """Test a classified failure on the single path surfaces with dwell."""
        fetcher = scripted_fetcher(lambda chunk, attempt: FailureKind.SERVER_ERROR)
        signals = Signals()
        facade = make_facade(fetcher, sleeper, signals)

        with pytest.raises(FatalRetrievalError):
            await facade.retrieve(query_of(10))

        assert len(fetcher.calls) == 1
        assert signals.labels[-1] == ERROR_MESSAGE
        assert sleeper.delays == [2.0]
        assert signals.log[-1] == ("loading", False)

    @pytest.mark.asyncio
    async def test_chunked_unexpected_error_dwells_then_clears(self, scripted_fetcher, sleeper):
        """Test a fatal chunked error shows the message, waits, then hides loading."""
        fetcher = scripted_fetcher(lambda chunk, attempt: ValueError("bad payload"))
        signals = Signals()
        facade = make_facade(fetcher, sleeper, signals)

        with pytest.raises(FatalRetrievalError):
            await facade.retrieve(query_of(90))

        assert signals.labels == [PREPARING_MESSAGE, ERROR_MESSAGE]
        assert sleeper.delays == [2.0]
        assert signals.loading_calls == [True, False]

    @pytest.mark.asyncio
    async def test_chunked_failures_recovered_internally(self, scripted_fetcher, sleeper):
        """Test classified chunk failures never reach the caller."""
        fetcher = scripted_fetcher(
            lambda chunk, attempt: FailureKind.NETWORK_ERROR if attempt < 2 else []
        )
        facade = make_facade(fetcher, sleeper)

        result = await facade.retrieve(query_of(90))

        assert result.attempts == result.chunks_used + 2

    @pytest.mark.asyncio
    async def test_superseded_cycle_leaves_overlay_alone(self, scripted_fetcher, sleeper):
        """Test a superseded cycle neither shows the error nor hides loading."""
        signals = Signals()
        facade = make_facade(scripted_fetcher(), sleeper, signals)
        token = CancellationToken()
        token.cancel()

        with pytest.raises(RetrievalCancelledError):
            await facade.retrieve(query_of(90), cancel_token=token)

        assert ERROR_MESSAGE not in signals.labels
        assert ("loading", False) not in signals.log
        assert sleeper.delays == []

    @pytest.mark.asyncio
    async def test_plain_cancellation_hides_loading(self, scripted_fetcher, sleeper):
        """Test a cancellation without successor still hides the overlay."""
        signals = Signals()
        facade = make_facade(scripted_fetcher(), sleeper, signals)
        token = CancellationToken()
        token.cancel("stopped", superseded=False)

        with pytest.raises(RetrievalCancelledError):
            await facade.retrieve(query_of(90), cancel_token=token)

        assert ERROR_MESSAGE not in signals.labels
        assert signals.log[-1] == ("loading", False)

    @pytest.mark.asyncio
    async def test_single_failure_after_supersede_is_silent(self, scripted_fetcher, sleeper):
        """Test a single request failing after its cycle was superseded sends nothing."""
        token = CancellationToken()

        def script(chunk, attempt):
            token.cancel()
            return FailureKind.SERVER_ERROR

        signals = Signals()
        facade = make_facade(scripted_fetcher(script), sleeper, signals)

        with pytest.raises(RetrievalCancelledError):
            await facade.retrieve(query_of(10), cancel_token=token)

        assert signals.log == []
        assert sleeper.delays == []

    @pytest.mark.asyncio
    async def test_chunk_completing_after_supersede_sends_no_progress(
        self, scripted_fetcher, sleeper
    ):
        """Test a chunk returning after its cycle was superseded is not reported."""
        token = CancellationToken()

        def script(chunk, attempt):
            token.cancel()
            return []

        signals = Signals()
        facade = make_facade(scripted_fetcher(script), sleeper, signals)

        with pytest.raises(RetrievalCancelledError):
            await facade.retrieve(query_of(90), cancel_token=token)

        assert signals.labels == [PREPARING_MESSAGE]
        assert signals.loading_calls == [True]

    @pytest.mark.asyncio
    async def test_context_manager_closes_fetcher(self, scripted_fetcher, sleeper):
        """Test the facade closes its fetcher."""
        fetcher = scripted_fetcher()
        async with make_facade(fetcher, sleeper):
            pass
        assert fetcher.closed
