"""Filter-driven earthquake feed for map front-ends.

This wraps a RetrievalFacade and exposes the API a filter panel needs:

- refresh/update_filters/set_custom_range/reset_filters: each one snapshots
  the current FilterSettings and starts a new retrieval cycle
- a newer cycle cancels the one it supersedes; a cancelled cycle never
  delivers results, so late responses cannot overwrite newer data
- results go to the rendering callback, failures to the error callback

Notes:
- Filter settings are immutable; every change produces a new snapshot, and a
  cycle keeps the snapshot it started with.
- Selecting the custom period without both dates only records the change;
  fetching waits until the range is complete.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import date
from typing import Any

from ..api import RetrievalFacade
from ..core import CancellationToken, FatalRetrievalError, RetrievalCancelledError, ValidationError
from ..models import EventRecord, EventStats, FilterSettings
from ..models.filters import CUSTOM_PERIOD, utc_today
from ..runtime.chunking import RetrievalResult
from ..utils import invoke_callback

logger = logging.getLogger(__name__)

RenderCallback = (
    Callable[[list[EventRecord], EventStats], Awaitable[None]]
    | Callable[[list[EventRecord], EventStats], None]
)
ErrorCallback = Callable[[str], Awaitable[None]] | Callable[[str], None]


class QuakeFeed:
    """Earthquake feed driven by filter snapshots."""

    def __init__(
        self,
        facade: RetrievalFacade | None = None,
        *,
        filters: FilterSettings | None = None,
        on_render: RenderCallback | None = None,
        on_error: ErrorCallback | None = None,
        today: Callable[[], date] = utc_today,
    ) -> None:
        self._facade = facade or RetrievalFacade()
        self._filters = filters or FilterSettings.defaults()
        self._on_render = on_render
        self._on_error = on_error
        self._today = today

        self._token: CancellationToken | None = None
        self._last_result: RetrievalResult | None = None

    @property
    def filters(self) -> FilterSettings:
        """Current filter snapshot."""
        return self._filters

    @property
    def last_result(self) -> RetrievalResult | None:
        """Result of the most recent cycle that was delivered."""
        return self._last_result

    @property
    def in_flight(self) -> bool:
        return self._token is not None and not self._token.cancelled

    # ----------------------
    # Filter changes
    # ----------------------
    async def update_filters(self, **changes: Any) -> RetrievalResult | None:
        """Apply filter changes and refresh.

        Returns:
            The delivered result, or None if nothing was delivered
        """
        self._filters = self._filters.updated(**changes)
        if self._filters.is_custom and (
            self._filters.custom_start is None or self._filters.custom_end is None
        ):
            return None
        return await self.refresh()

    async def set_custom_range(self, start: date | None, end: date | None) -> RetrievalResult | None:
        """Switch to a custom date range and refresh."""
        if start is None or end is None:
            await self._report("Please select both start and end dates")
            return None
        return await self.update_filters(time_period=CUSTOM_PERIOD, custom_start=start, custom_end=end)

    async def reset_filters(self) -> RetrievalResult | None:
        """Restore default filters and refresh."""
        self._filters = FilterSettings.defaults()
        return await self.refresh()

    async def load_initial(self) -> RetrievalResult | None:
        """First load on startup, without the loading overlay."""
        return await self.refresh(show_loading=False)

    # ----------------------
    # Retrieval
    # ----------------------
    async def refresh(self, *, show_loading: bool = True) -> RetrievalResult | None:
        """Run a retrieval cycle for the current filter snapshot.

        Any cycle still in flight is cancelled first.

        Returns:
            The delivered result, or None if the cycle failed or was superseded
        """
        settings = self._filters
        try:
            query = settings.to_query(self._today())
            self._facade.route(query)
        except ValidationError as e:
            await self._report(str(e))
            return None

        token = self._supersede()
        try:
            result = await self._facade.retrieve(query, cancel_token=token, show_loading=show_loading)
        except RetrievalCancelledError:
            return None
        except FatalRetrievalError as e:
            logger.error(f"Error fetching earthquakes: {e}")
            if not token.cancelled:
                await self._report(str(e))
            return None
        finally:
            if self._token is token:
                self._token = None

        if token.cancelled:
            logger.debug("Discarding results of a superseded cycle")
            return None

        self._last_result = result
        await invoke_callback(self._on_render, result.records, result.stats)
        return result

    def cancel(self) -> None:
        """Cancel the cycle in flight, if any."""
        if self._token is not None:
            self._token.cancel("cancelled by caller", superseded=False)
            self._token = None

    def _supersede(self) -> CancellationToken:
        if self._token is not None:
            self._token.cancel("superseded by a newer request")
        self._token = CancellationToken()
        return self._token

    async def _report(self, message: str) -> None:
        await invoke_callback(self._on_error, message)

    async def close(self) -> None:
        """Cancel any cycle in flight and close the facade."""
        self.cancel()
        await self._facade.close()

    async def __aenter__(self) -> QuakeFeed:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
