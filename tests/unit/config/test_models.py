"""Tests for the command-line configuration schema."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from notifier.config.models import DEFAULT_INTERVAL_SECONDS, NotifierConfig

URL = "https://hooks.example.com/notify"


class TestNotifierConfig:
    """Test NotifierConfig validation."""

    def test_defaults(self) -> None:
        config = NotifierConfig(url=URL)

        assert config.interval_seconds == DEFAULT_INTERVAL_SECONDS == 5.0
        assert config.max_parallel == 1000
        assert config.user_agent is None
        assert config.request_timeout_seconds is None
        assert config.log_level == "WARNING"

    @pytest.mark.parametrize(
        ("interval", "expected"),
        [("1s", 1.0), ("500ms", 0.5), ("1m30s", 90.0), (2, 2.0), ("0", 0.0)],
    )
    def test_interval_accepts_durations(self, interval: object, expected: float) -> None:
        config = NotifierConfig.model_validate({"url": URL, "interval_seconds": interval})

        assert config.interval_seconds == pytest.approx(expected)

    @pytest.mark.parametrize("interval", ["soon", "-1s", -1])
    def test_invalid_interval_is_rejected(self, interval: object) -> None:
        with pytest.raises(ValidationError):
            _ = NotifierConfig.model_validate({"url": URL, "interval_seconds": interval})

    def test_timeout_accepts_duration(self) -> None:
        config = NotifierConfig.model_validate({"url": URL, "request_timeout_seconds": "10s"})

        assert config.request_timeout_seconds == 10.0

    def test_zero_timeout_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _ = NotifierConfig.model_validate({"url": URL, "request_timeout_seconds": "0s"})

    @pytest.mark.parametrize("url", ["", "hooks.example.com", "ftp://hooks.example.com"])
    def test_invalid_url_is_rejected(self, url: str) -> None:
        with pytest.raises(ValidationError):
            _ = NotifierConfig(url=url)

    def test_parallel_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            _ = NotifierConfig(url=URL, max_parallel=0)

    def test_log_level_is_normalized(self) -> None:
        assert NotifierConfig.model_validate({"url": URL, "log_level": "debug"}).log_level == "DEBUG"

    def test_unknown_log_level_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _ = NotifierConfig.model_validate({"url": URL, "log_level": "TRACE"})

    def test_unknown_fields_are_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _ = NotifierConfig.model_validate({"url": URL, "retries": 3})

    def test_client_options(self) -> None:
        config = NotifierConfig(
            url=URL,
            max_parallel=10,
            user_agent="notifier/1.0",
            request_timeout_seconds=3.0,
        )

        options = config.client_options()

        assert options.max_parallel == 10
        assert options.user_agent == "notifier/1.0"
        assert options.request_timeout_seconds == 3.0
