"""Logging setup with per-call correlation IDs and credential redaction.

Each notification worker stores its ``call_id`` in ``correlation_id_var``
while it runs. ``CorrelationIDFilter`` stamps that value on every record, so
the DEBUG records of one delivery can be grouped together even when hundreds
of calls are in flight. ``SecretRedactingFilter`` removes credentials that
notification URLs tend to carry.
"""

import contextvars
import logging
import sys
from collections.abc import Mapping
from typing import Final, TextIO, override

from notifier.utils.sanitization import sanitize_args, sanitize_value

# Copied into every asyncio task at creation, so each worker sees its own value
correlation_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "notifier_correlation_id",
    default=None,
)

DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] - %(message)s"

NO_CORRELATION_ID: Final[str] = "N/A"

# Attributes every LogRecord has; anything else came in through ``extra``
_RECORD_ATTRS: Final[frozenset[str]] = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", None, None).__dict__
) | {"message", "asctime", "correlation_id"}


class CorrelationIDFilter(logging.Filter):
    """Stamp the active correlation ID (or ``N/A``) on each record."""

    @override
    def filter(self, record: logging.LogRecord) -> bool:
        call_id = correlation_id_var.get()
        record.correlation_id = NO_CORRELATION_ID if call_id is None else call_id
        return True


class SecretRedactingFilter(logging.Filter):
    """Redact credentials from the message, its arguments and extra fields.

    Examples:
        >>> logger.debug("POST to %s", "https://hooks.example.com/n?token=abc")
        # Logged as: "POST to https://hooks.example.com/n?token=<REDACTED>"
    """

    @override
    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            message = sanitize_value(record.msg)
            if isinstance(message, str):
                record.msg = message

        if isinstance(record.args, tuple) and record.args:
            record.args = sanitize_args(record.args)

        extra_fields = [name for name in record.__dict__ if name not in _RECORD_ATTRS and not name.startswith("_")]
        for name in extra_fields:
            value: object = record.__dict__[name]  # pyright: ignore[reportAny]
            record.__dict__[name] = sanitize_value(value, field_name=name)

        return True


def _console_handler(stream: TextIO) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))
    handler.addFilter(CorrelationIDFilter())
    handler.addFilter(SecretRedactingFilter())
    return handler


def configure_logging(
    *,
    log_level: str = "WARNING",
    enable_console: bool = True,
    stream: TextIO | None = None,
) -> None:
    """Install the notifier's console handler on the root logger.

    Handlers already attached to the root logger are removed first, so
    calling this twice does not duplicate output.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR (case-insensitive)
        enable_console: Attach the console handler
        stream: Output stream (default: stderr)

    Example:
        >>> configure_logging(log_level="DEBUG")
        >>> set_correlation_id("3f2a9c")
        >>> get_logger(__name__).debug("Notification settled", extra={"success": True})
    """
    level = logging.getLevelNamesMapping().get(log_level.upper(), logging.WARNING)

    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    if enable_console:
        root.addHandler(_console_handler(stream if stream is not None else sys.stderr))


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a notifier module (pass ``__name__``)."""
    return logging.getLogger(name)


def set_correlation_id(correlation_id: str) -> contextvars.Token[str | None]:
    """Make ``correlation_id`` the active correlation ID.

    Returns:
        Token restoring the previous value through ``reset_correlation_id``
    """
    return correlation_id_var.set(correlation_id)


def reset_correlation_id(token: contextvars.Token[str | None]) -> None:
    """Restore the correlation ID that was active before ``set_correlation_id``."""
    correlation_id_var.reset(token)


def get_correlation_id() -> str | None:
    return correlation_id_var.get()


def clear_correlation_id() -> None:
    """Forget the active correlation ID in the current context."""
    _ = correlation_id_var.set(None)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    *,
    extra: Mapping[str, object] | None = None,
) -> None:
    """Emit ``message`` with structured fields and the active correlation ID.

    Nothing is built when ``level`` is disabled for ``logger``.

    Args:
        logger: Target logger
        level: Record level, e.g. ``logging.DEBUG``
        message: Record message
        extra: Structured fields attached to the record
    """
    if not logger.isEnabledFor(level):
        return

    fields: dict[str, object] = dict(extra or {})
    call_id = get_correlation_id()
    if call_id is not None:
        fields["correlation_id"] = call_id

    logger.log(level, message, extra=fields)
