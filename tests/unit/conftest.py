"""Shared fixtures for unit tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from quakemap.data.core import FailureKind
from quakemap.data.models import EventRecord, FilterPredicate
from quakemap.data.runtime.chunking import Chunk, ChunkResult


class ScriptedFetcher:
    """Stand-in for ChunkFetcher driven by a script.

    The script receives (chunk, attempt_index) and returns a list of records,
    a FailureKind, or an exception to raise.
    """

    def __init__(self, script: Callable[[Chunk, int], Any] | None = None) -> None:
        self.calls: list[Chunk] = []
        self.filters: list[FilterPredicate] = []
        self.closed = False
        self._script = script or (lambda chunk, attempt: [])

    async def fetch(self, chunk: Chunk, filters: FilterPredicate) -> ChunkResult:
        self.calls.append(chunk)
        self.filters.append(filters)
        outcome = self._script(chunk, len(self.calls) - 1)
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, FailureKind):
            return ChunkResult.failed(chunk, outcome, outcome.value)
        return ChunkResult.success(chunk, list(outcome))

    async def close(self) -> None:
        self.closed = True


class SleepRecorder:
    """Async sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def scripted_fetcher() -> type[ScriptedFetcher]:
    return ScriptedFetcher


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_record() -> Callable[..., EventRecord]:
    def _make(
        magnitude: float | None = 4.0,
        depth: float = 10.0,
        timestamp_ms: int = 1_704_067_200_000,
        place: str | None = "Somewhere",
        longitude: float = 140.0,
        latitude: float = 35.0,
        event_id: str | None = None,
    ) -> EventRecord:
        return EventRecord(
            longitude=longitude,
            latitude=latitude,
            depth=depth,
            magnitude=magnitude,
            place=place,
            timestamp_ms=timestamp_ms,
            event_id=event_id,
        )

    return _make
