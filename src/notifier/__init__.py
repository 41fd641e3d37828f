"""Notifier - bounded-concurrency HTTP notification dispatcher.

This package delivers one-way notifications (HTTP POST with a text payload)
to a single endpoint, keeping at most N calls in flight and exposing each
call's outcome through a write-once result handle.
"""

from notifier.core import (
    AdmissionGate,
    CallResult,
    CanceledError,
    CancellationToken,
    ClientOptions,
    ConfigurationError,
    NotificationClient,
    NotificationError,
    NotifierError,
    ResultAlreadySettledError,
    TransportError,
    UnexpectedStatusError,
)
from notifier.types import PENDING, Outcome, Pending, Request, Response, Transport
from notifier.utils.http_client import AIOHTTPTransport

__all__ = [
    "AIOHTTPTransport",
    "AdmissionGate",
    "CallResult",
    "CanceledError",
    "CancellationToken",
    "ClientOptions",
    "ConfigurationError",
    "NotificationClient",
    "NotificationError",
    "NotifierError",
    "Outcome",
    "PENDING",
    "Pending",
    "Request",
    "Response",
    "ResultAlreadySettledError",
    "Transport",
    "TransportError",
    "UnexpectedStatusError",
]
