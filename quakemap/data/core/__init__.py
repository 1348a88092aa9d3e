"""Core components."""

from .cancellation import CancellationToken
from .enums import FailureKind, RetrievalPath, RetrievalPhase
from .exceptions import (
    DataError,
    FatalRetrievalError,
    NetworkError,
    ProviderError,
    RateLimitError,
    RetrievalCancelledError,
    ServerError,
    TooManyRecordsError,
    ValidationError,
)

__all__ = [
    "CancellationToken",
    "FailureKind",
    "RetrievalPath",
    "RetrievalPhase",
    # Exceptions
    "DataError",
    "FatalRetrievalError",
    "NetworkError",
    "ProviderError",
    "RateLimitError",
    "RetrievalCancelledError",
    "ServerError",
    "TooManyRecordsError",
    "ValidationError",
]
