"""Tests for the notification error taxonomy."""

from __future__ import annotations

import pytest

from notifier.core.errors import (
    SUCCESS_STATUSES,
    CanceledError,
    ConfigurationError,
    NotificationError,
    NotifierError,
    ResultAlreadySettledError,
    TransportError,
    UnexpectedStatusError,
    classify_status,
)


class TestClassifyStatus:
    """Test mapping of status codes to outcomes."""

    @pytest.mark.parametrize("status", [200, 201, 204])
    def test_success_statuses(self, status: int) -> None:
        assert classify_status(status) is None
        assert status in SUCCESS_STATUSES

    @pytest.mark.parametrize("status", [202, 203, 205, 301, 304, 400, 404, 429, 500, 503])
    def test_other_statuses_are_errors(self, status: int) -> None:
        error = classify_status(status)

        assert isinstance(error, UnexpectedStatusError)
        assert error.status_code == status


class TestUnexpectedStatusError:
    """Test status error rendering."""

    @pytest.mark.parametrize(
        ("status", "text"),
        [
            (500, "500 Internal Server Error"),
            (404, "404 Not Found"),
            (202, "202 Accepted"),
            (429, "429 Too Many Requests"),
        ],
    )
    def test_message_contains_code_and_reason(self, status: int, text: str) -> None:
        assert str(UnexpectedStatusError(status)) == text

    def test_unknown_status_renders_code_only(self) -> None:
        assert str(UnexpectedStatusError(599)) == "599"


class TestTransportError:
    """Test transport error construction."""

    def test_keeps_cause(self) -> None:
        cause = ConnectionRefusedError("connection refused")
        error = TransportError(cause=cause)

        assert error.cause is cause
        assert error.__cause__ is cause
        assert str(error) == "transport error: connection refused"

    def test_cause_without_message_uses_type_name(self) -> None:
        error = TransportError(cause=TimeoutError())

        assert str(error) == "transport error: TimeoutError"

    def test_explicit_message(self) -> None:
        error = TransportError("dns lookup failed")

        assert str(error) == "dns lookup failed"
        assert error.cause is None


def test_hierarchy() -> None:
    assert issubclass(CanceledError, NotificationError)
    assert issubclass(UnexpectedStatusError, NotificationError)
    assert issubclass(TransportError, NotificationError)
    assert issubclass(NotificationError, NotifierError)
    assert issubclass(ConfigurationError, NotifierError)
    assert issubclass(ResultAlreadySettledError, NotifierError)
    assert issubclass(ResultAlreadySettledError, RuntimeError)


def test_configuration_error_context_defaults_to_empty() -> None:
    assert ConfigurationError("bad").context == {}
    assert ConfigurationError("bad", {"field": "url"}).context == {"field": "url"}
