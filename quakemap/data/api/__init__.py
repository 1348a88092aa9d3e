"""High-level retrieval API."""

from .retrieval_api import (
    ERROR_MESSAGE,
    LOADING_MESSAGE,
    PREPARING_MESSAGE,
    RANGE_TOO_LARGE_MESSAGE,
    RetrievalFacade,
)

__all__ = [
    "ERROR_MESSAGE",
    "LOADING_MESSAGE",
    "PREPARING_MESSAGE",
    "RANGE_TOO_LARGE_MESSAGE",
    "RetrievalFacade",
]
