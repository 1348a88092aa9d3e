"""Cooperative cancellation for retrieval cycles."""

from __future__ import annotations

from .exceptions import RetrievalCancelledError


class CancellationToken:
    """Flag shared between a cycle and whoever may supersede it.

    The controller checks the token before every fetch, after every fetch
    returns, and after every timed delay; a cancelled cycle stops at the next
    check and never delivers results.

    A token cancelled because a newer cycle replaced it is `superseded`: the
    newer cycle owns the loading overlay from then on, so the stale one must
    not touch it. A plain cancellation leaves no successor behind.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._superseded = False
        self._reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def superseded(self) -> bool:
        return self._superseded

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str = "superseded", *, superseded: bool = True) -> None:
        if not self._cancelled:
            self._cancelled = True
            self._superseded = superseded
            self._reason = reason

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise RetrievalCancelledError(f"Retrieval cancelled: {self._reason}")
