"""Type definitions and protocols for the notifier package.

This package provides:
- Data models (immutable dataclasses)
- Protocol definitions (structural subtyping interfaces)
"""

from notifier.types.models import (
    PENDING,
    Outcome,
    Pending,
    Request,
    Response,
)
from notifier.types.protocols import Transport

__all__ = [
    # Data models
    "Outcome",
    "PENDING",
    "Pending",
    "Request",
    "Response",
    # Protocols
    "Transport",
]
