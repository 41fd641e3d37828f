"""Configuration schema for the notifier command-line tool.

The model is validated with Pydantic; duration strings such as "5s" are
accepted for the interval and converted to seconds.
"""

from typing import Annotated, Final, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from notifier.core.gate import DEFAULT_CAPACITY
from notifier.core.options import ClientOptions, validate_notify_url
from notifier.utils.formatting import parse_duration

DEFAULT_INTERVAL_SECONDS: Final[float] = 5.0

type LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class NotifierConfig(BaseModel):
    """Configuration for the notifier command-line tool."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: Annotated[str, Field(description="Notification URL")]
    interval_seconds: Annotated[
        float,
        Field(
            ge=0,
            description="Delay between consecutive messages in seconds",
        ),
    ] = DEFAULT_INTERVAL_SECONDS
    max_parallel: Annotated[
        int,
        Field(
            ge=1,
            description="Maximum number of notifications in parallel",
        ),
    ] = DEFAULT_CAPACITY
    user_agent: str | None = None
    request_timeout_seconds: Annotated[float | None, Field(gt=0)] = None
    log_level: LogLevel = "WARNING"

    @field_validator("interval_seconds", "request_timeout_seconds", mode="before")
    @classmethod
    def parse_durations(cls, v: object) -> object:
        """Accept duration strings such as "5s" or "500ms"."""
        if isinstance(v, str):
            return parse_duration(v)
        return v

    @field_validator("url", mode="after")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return validate_notify_url(v)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    def client_options(self) -> ClientOptions:
        """Build the client options described by this configuration."""
        return ClientOptions(
            max_parallel=self.max_parallel,
            user_agent=self.user_agent,
            request_timeout_seconds=self.request_timeout_seconds,
        )
