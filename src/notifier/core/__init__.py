"""Core notification dispatch components.

This package provides:
- NotificationClient: bounded-concurrency dispatcher
- AdmissionGate: counting gate limiting in-flight calls
- CallResult: write-once result of one notification
- CancellationToken: shared cooperative cancellation signal
- The error taxonomy for failed notifications
"""

from notifier.core.cancellation import CancellationToken
from notifier.core.dispatcher import NotificationClient
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
from notifier.core.gate import DEFAULT_CAPACITY, AdmissionGate, GateLease
from notifier.core.options import ClientOptions, validate_notify_url
from notifier.core.result import CallResult

__all__ = [
    # Dispatcher
    "ClientOptions",
    "NotificationClient",
    "validate_notify_url",
    # Concurrency primitives
    "AdmissionGate",
    "CallResult",
    "CancellationToken",
    "DEFAULT_CAPACITY",
    "GateLease",
    # Errors
    "CanceledError",
    "ConfigurationError",
    "NotificationError",
    "NotifierError",
    "ResultAlreadySettledError",
    "SUCCESS_STATUSES",
    "TransportError",
    "UnexpectedStatusError",
    "classify_status",
]
