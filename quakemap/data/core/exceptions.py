"""Custom exception hierarchy."""

from __future__ import annotations


class DataError(Exception):
    """Base exception for all library errors."""

    pass


class ValidationError(DataError):
    """Request validation failure, raised before any network call."""

    pass


class ProviderError(DataError):
    """Error from the remote event service."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(ProviderError):
    """Provider rate limit exceeded."""

    def __init__(self, message: str, retry_after: float | None = None) -> None:
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class ServerError(ProviderError):
    """Non-success HTTP status other than 429."""

    pass


class TooManyRecordsError(ProviderError):
    """Response reported a record count at or above the per-request ceiling.

    The request itself succeeded; the window it covered is too wide.
    """

    def __init__(self, count: int, ceiling: int) -> None:
        super().__init__(
            f"Too many records in this chunk ({count} >= {ceiling}). "
            "Consider reducing chunk size.",
            status_code=200,
        )
        self.count = count
        self.ceiling = ceiling


class NetworkError(DataError):
    """Transport failure before a response was obtained."""

    pass


class FatalRetrievalError(DataError):
    """Unrecoverable failure that ends a retrieval cycle."""

    pass


class RetrievalCancelledError(DataError):
    """Retrieval cycle was superseded and cancelled."""

    pass
