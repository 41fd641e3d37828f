"""Data models for the notifier package.

This module defines the dataclasses exchanged between the dispatcher,
its transport and the callers holding call results.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from notifier.core.errors import NotificationError


@dataclass(slots=True, frozen=True)
class Request:
    """HTTP request handed to a transport.

    Represents one outbound notification call: method, target URL,
    raw body bytes and request headers.
    """

    method: str
    url: str
    body: bytes
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class Response:
    """HTTP response.

    Only the status line and headers are kept; the body has already
    been drained by the transport.
    """

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class Outcome:
    """Settled value of a call result.

    ``error`` is None when the notification was delivered, otherwise the
    classified failure.
    """

    error: NotificationError | None = None
    elapsed_ms: float = 0.0

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def canceled(self) -> bool:
        return self.error is not None and self.error.canceled

    def raise_for_error(self) -> None:
        """Raise the stored error, if any."""
        if self.error is not None:
            raise self.error


class Pending(Enum):
    """Marker returned by ``CallResult.peek`` while a call is unsettled."""

    PENDING = "pending"

    def __repr__(self) -> str:
        return "PENDING"


PENDING: Final = Pending.PENDING
