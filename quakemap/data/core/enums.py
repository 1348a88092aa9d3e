"""Core enumerations shared across the retrieval engine.

Key Types:
    - FailureKind: Classified chunk-level failures
    - RetrievalPhase: States of the adaptive retrieval state machine
    - RetrievalPath: Single request vs chunked retrieval routing
"""

from enum import Enum


class FailureKind(str, Enum):
    """Classified outcome of a failed chunk fetch.

    All kinds trigger the same shrink-and-retry remedy in the controller.
    """

    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    TOO_MANY_RECORDS = "too_many_records"
    NETWORK_ERROR = "network_error"


class RetrievalPhase(str, Enum):
    """Adaptive controller state machine phases."""

    IDLE = "idle"
    SPLITTING = "splitting"
    FETCHING = "fetching"
    ADVANCING = "advancing"
    SHRINKING = "shrinking"
    DONE = "done"
    FATAL = "fatal"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (RetrievalPhase.DONE, RetrievalPhase.FATAL, RetrievalPhase.CANCELLED)


class RetrievalPath(str, Enum):
    """How the facade routed a query."""

    SINGLE = "single"
    CHUNKED = "chunked"
