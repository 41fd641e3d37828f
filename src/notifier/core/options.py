"""Construction options for NotificationClient.

Options are validated with Pydantic when built and are immutable afterwards;
the client reads them once in its constructor.
"""

from typing import Annotated
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

from notifier.core.gate import DEFAULT_CAPACITY

__all__ = ["ClientOptions", "validate_notify_url"]


def validate_notify_url(url: str) -> str:
    """Check that a notification URL is an absolute http(s) URL.

    Args:
        url: URL to validate

    Returns:
        The URL with surrounding whitespace removed

    Raises:
        ValueError: If the URL is empty, relative or uses another scheme
    """
    value = url.strip()
    if not value:
        msg = "The notification url is required"
        raise ValueError(msg)

    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https"):
        msg = f"Notification URL must use HTTP or HTTPS protocol, got: {parsed.scheme or 'none'}"
        raise ValueError(msg)
    if not parsed.netloc:
        msg = "Notification URL must include a host"
        raise ValueError(msg)
    return value


class ClientOptions(BaseModel):
    """Options applied when a NotificationClient is constructed.

    The transport is not part of this model; it is passed to the client
    constructor directly since it is an arbitrary object.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_parallel: Annotated[
        int,
        Field(
            ge=1,
            description="Maximum number of notification calls in flight",
        ),
    ] = DEFAULT_CAPACITY
    user_agent: Annotated[
        str | None,
        Field(
            description="User-Agent header value, omitted when not set",
        ),
    ] = None
    request_timeout_seconds: Annotated[
        float | None,
        Field(
            gt=0,
            description="Total timeout for one request in seconds, no limit when not set",
        ),
    ] = None

    @field_validator("user_agent", mode="after")
    @classmethod
    def normalize_user_agent(cls, v: str | None) -> str | None:
        """Treat a blank user agent as not configured."""
        if v is None:
            return None
        stripped = v.strip()
        return stripped or None
