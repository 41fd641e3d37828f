"""Shared utility modules.

This package provides:
- Duration parsing for CLI and configuration values
- Secret sanitization for log output
- Logging setup with correlation IDs
- The aiohttp transport
"""

from notifier.utils.formatting import parse_duration
from notifier.utils.sanitization import (
    REDACTED,
    sanitize_exception,
    sanitize_url,
    sanitize_value,
)

__all__ = [
    "REDACTED",
    "parse_duration",
    "sanitize_exception",
    "sanitize_url",
    "sanitize_value",
]
