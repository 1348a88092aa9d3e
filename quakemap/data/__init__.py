"""quakemap-data - Adaptive chunked retrieval of seismic event data."""

from .api import RetrievalFacade
from .clients import QuakeFeed
from .connectors.usgs import RECORD_CEILING, ChunkFetcher
from .core import (
    CancellationToken,
    DataError,
    FailureKind,
    FatalRetrievalError,
    NetworkError,
    ProviderError,
    RateLimitError,
    RetrievalCancelledError,
    RetrievalPath,
    RetrievalPhase,
    ServerError,
    TooManyRecordsError,
    ValidationError,
)
from .models import (
    EventRecord,
    EventStats,
    FilterPredicate,
    FilterSettings,
    ProgressEvent,
    Query,
    compute_stats,
)
from .runtime.chunking import (
    AdaptiveController,
    Chunk,
    ChunkFailure,
    ChunkResult,
    RangeSplitter,
    RetrievalPolicy,
    RetrievalResult,
)

__version__ = "0.1.0"

__all__ = [
    # Clients
    "QuakeFeed",
    "RetrievalFacade",
    # Engine
    "AdaptiveController",
    "ChunkFetcher",
    "RangeSplitter",
    "RetrievalPolicy",
    "RECORD_CEILING",
    # Chunk types
    "Chunk",
    "ChunkFailure",
    "ChunkResult",
    "RetrievalResult",
    # Models
    "EventRecord",
    "EventStats",
    "FilterPredicate",
    "FilterSettings",
    "ProgressEvent",
    "Query",
    "compute_stats",
    # Enums and cancellation
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
