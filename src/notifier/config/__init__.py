"""Configuration for the notifier command-line tool.

This package provides:
- NotifierConfig: Pydantic schema for the tool's settings
- load_config: YAML loading with environment variable resolution
"""

from notifier.config.loader import (
    load_config,
    read_config_file,
    resolve_env_var,
    resolve_env_vars_in_dict,
)
from notifier.config.models import (
    DEFAULT_INTERVAL_SECONDS,
    LogLevel,
    NotifierConfig,
)

__all__ = [
    "DEFAULT_INTERVAL_SECONDS",
    "LogLevel",
    "NotifierConfig",
    "load_config",
    "read_config_file",
    "resolve_env_var",
    "resolve_env_vars_in_dict",
]
