"""Runtime orchestration components."""

from .chunking import AdaptiveController, RangeSplitter, RetrievalPolicy, RetrievalResult
from .rest import HTTPClient, RestRunner

__all__ = [
    "AdaptiveController",
    "HTTPClient",
    "RangeSplitter",
    "RestRunner",
    "RetrievalPolicy",
    "RetrievalResult",
]
