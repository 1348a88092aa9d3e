"""HTTP client helper."""

from __future__ import annotations

import asyncio
from typing import Any

import aiohttp

from ...core.exceptions import NetworkError, RateLimitError, ServerError


class HTTPClient:
    """Async HTTP client wrapper.

    Non-success statuses and transport failures are raised as library
    exceptions; retry policy belongs to the caller.
    """

    def __init__(self, base_url: str | None = None, timeout: float = 30.0) -> None:
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET request returning the decoded JSON body.

        Raises:
            RateLimitError: On HTTP 429
            ServerError: On any other non-success status
            NetworkError: If no response could be obtained
        """
        if self.base_url and not url.startswith("http"):
            url = f"{self.base_url}{url}"

        try:
            async with self.session.get(url, params=params, headers=headers) as response:
                if response.status == 429:
                    raise RateLimitError(
                        "Rate limited: Too many requests",
                        retry_after=_parse_retry_after(response.headers.get("Retry-After")),
                    )
                if response.status >= 400:
                    raise ServerError(f"HTTP error! status: {response.status}", status_code=response.status)
                return await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(f"Request to {url} failed: {e}") from e

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()


def _parse_retry_after(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None
