"""Precise unit tests for exception hierarchy and cancellation.

Tests focus on meaningful behavior, not just field access.
"""

import pytest

from quakemap.data.core import (
    CancellationToken,
    DataError,
    FatalRetrievalError,
    NetworkError,
    ProviderError,
    RateLimitError,
    RetrievalCancelledError,
    RetrievalPhase,
    ServerError,
    TooManyRecordsError,
    ValidationError,
)


def test_rate_limit_error_with_retry_after():
    """Test RateLimitError with retry_after (meaningful behavior)."""
    error = RateLimitError("rate limit", retry_after=1.5)
    assert error.status_code == 429
    assert error.retry_after == 1.5
    assert isinstance(error, ProviderError)
    assert isinstance(error, DataError)


def test_server_error_with_status_code():
    """Test ServerError keeps the status code."""
    error = ServerError("HTTP error! status: 500", status_code=500)
    assert str(error) == "HTTP error! status: 500"
    assert error.status_code == 500
    assert isinstance(error, ProviderError)


def test_too_many_records_error_context():
    """Test TooManyRecordsError carries the count and ceiling."""
    error = TooManyRecordsError(count=16000, ceiling=15000)
    assert error.count == 16000
    assert error.ceiling == 15000
    assert error.status_code == 200
    assert "Too many records in this chunk" in str(error)


@pytest.mark.parametrize(
    "exc_class",
    [ValidationError, NetworkError, FatalRetrievalError, RetrievalCancelledError],
)
def test_library_errors_share_base(exc_class):
    """Test every library error derives from DataError."""
    assert issubclass(exc_class, DataError)
    assert not issubclass(exc_class, ProviderError)


class TestCancellationToken:
    """Test CancellationToken."""

    def test_fresh_token_not_cancelled(self):
        """Test a new token passes checks."""
        token = CancellationToken()
        assert not token.cancelled
        assert token.reason is None
        token.raise_if_cancelled()

    def test_cancel_raises_on_check(self):
        """Test a cancelled token raises with its reason."""
        token = CancellationToken()
        token.cancel("newer request")

        with pytest.raises(RetrievalCancelledError, match="newer request"):
            token.raise_if_cancelled()

    def test_superseded_flag(self):
        """Test default cancellation marks the token superseded."""
        replaced = CancellationToken()
        replaced.cancel()
        stopped = CancellationToken()
        stopped.cancel("stopped", superseded=False)

        assert replaced.superseded
        assert stopped.cancelled
        assert not stopped.superseded

    def test_first_reason_kept(self):
        """Test cancelling twice keeps the first reason."""
        token = CancellationToken()
        token.cancel("first")
        token.cancel("second")
        assert token.reason == "first"


def test_terminal_phases():
    """Test only DONE, FATAL and CANCELLED are terminal."""
    terminal = {phase for phase in RetrievalPhase if phase.is_terminal}
    assert terminal == {RetrievalPhase.DONE, RetrievalPhase.FATAL, RetrievalPhase.CANCELLED}
