"""Error taxonomy for notification delivery.

Failed notifications never raise across the task boundary: the worker stores
one of the ``NotificationError`` subclasses below in the call's ``Outcome``
and callers read it back through ``CallResult.peek`` or ``CallResult.wait``.

Hierarchy::

    NotifierError
    ├── ConfigurationError
    ├── ResultAlreadySettledError
    └── NotificationError
        ├── CanceledError
        ├── UnexpectedStatusError
        └── TransportError
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, ClassVar, Final

__all__ = [
    "SUCCESS_STATUSES",
    "CanceledError",
    "ConfigurationError",
    "NotificationError",
    "NotifierError",
    "ResultAlreadySettledError",
    "TransportError",
    "UnexpectedStatusError",
    "classify_status",
]

# Status codes accepted as a delivered notification
SUCCESS_STATUSES: Final[frozenset[int]] = frozenset(
    {HTTPStatus.OK, HTTPStatus.CREATED, HTTPStatus.NO_CONTENT}
)


class NotifierError(Exception):
    """Base exception for everything raised by the notifier package."""


class ConfigurationError(NotifierError):
    """Raised when a client or the CLI is configured with invalid values."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:  # pyright: ignore[reportAny] # Flexible config error context
        """Initialize ConfigurationError.

        Args:
            message: Error message
            context: Additional context information for debugging
        """
        super().__init__(message)
        self.context: dict[str, Any] = context or {}  # pyright: ignore[reportAny] # Flexible config error context


class ResultAlreadySettledError(NotifierError, RuntimeError):
    """Raised when a call result is settled a second time."""


class NotificationError(NotifierError):
    """Base class of every failed notification outcome."""

    canceled: ClassVar[bool] = False


class CanceledError(NotificationError):
    """The cancellation token fired before or during the call."""

    canceled: ClassVar[bool] = True

    def __init__(self, message: str = "notification canceled") -> None:
        super().__init__(message)


class UnexpectedStatusError(NotificationError):
    """The endpoint answered with a status outside 200, 201 and 204."""

    status_code: int

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"{status_code} {_status_text(status_code)}".rstrip())


class TransportError(NotificationError):
    """The request could not be completed (DNS, connection, timeout, protocol)."""

    cause: BaseException | None

    def __init__(self, message: str | None = None, *, cause: BaseException | None = None) -> None:
        if message is None:
            message = _describe_cause(cause)
        super().__init__(message)
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


def classify_status(status: int) -> NotificationError | None:
    """Map an HTTP status code to an outcome error.

    Args:
        status: Response status code

    Returns:
        None for 200, 201 and 204, otherwise an UnexpectedStatusError
    """
    if status in SUCCESS_STATUSES:
        return None
    return UnexpectedStatusError(status)


def _status_text(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return ""


def _describe_cause(cause: BaseException | None) -> str:
    if cause is None:
        return "transport error"
    detail = str(cause)
    if detail:
        return f"transport error: {detail}"
    return f"transport error: {type(cause).__name__}"
