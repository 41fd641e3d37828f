"""Configuration loading for the notifier command-line tool.

Reads an optional YAML file, resolves ``${VARIABLE_NAME}`` references from
the environment, applies command-line overrides and validates the result
against ``NotifierConfig``. Every failure is reported as a
``ConfigurationError`` with an actionable message.
"""

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Final

import yaml
from pydantic import ValidationError

from notifier.config.models import NotifierConfig
from notifier.core.errors import ConfigurationError

# Matches ${VARIABLE_NAME} where VARIABLE_NAME contains letters, digits and underscores
ENV_VAR_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{([A-Za-z0-9_]+)\}")


def resolve_env_var(value: str) -> str:
    """Resolve environment variable references in a string value.

    Args:
        value: String potentially containing ``${VAR}`` references

    Returns:
        String with environment variables resolved

    Raises:
        ConfigurationError: If a referenced environment variable is not set

    Examples:
        >>> os.environ["NOTIFY_TOKEN"] = "abc"
        >>> resolve_env_var("https://hooks.example.com/n?token=${NOTIFY_TOKEN}")
        'https://hooks.example.com/n?token=abc'
    """

    def replace_match(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is None:
            msg = (
                f"Required environment variable '{var_name}' is not set. "
                f"Please set this variable before starting the application."
            )
            raise ConfigurationError(msg, {"env_var": var_name})
        return env_value

    return ENV_VAR_PATTERN.sub(replace_match, value)


def resolve_env_vars_in_dict(data: Mapping[str, object]) -> dict[str, object]:
    """Resolve environment variable references in every string value of a mapping.

    Nested mappings and lists are walked; other values are kept as-is.
    """
    return {key: _resolve(value) for key, value in data.items()}


def _resolve(value: object) -> object:
    if isinstance(value, str):
        return resolve_env_var(value)
    if isinstance(value, Mapping):
        return resolve_env_vars_in_dict(value)  # pyright: ignore[reportUnknownArgumentType]  # YAML boundary
    if isinstance(value, list):
        return [_resolve(item) for item in value]  # pyright: ignore[reportUnknownVariableType]  # YAML boundary
    return value


def read_config_file(config_path: Path) -> dict[str, object]:
    """Read a YAML configuration file and resolve environment variables.

    Args:
        config_path: Path to the YAML file

    Returns:
        Raw configuration mapping (not yet validated)

    Raises:
        ConfigurationError: If the file is missing, unreadable or malformed
    """
    if not config_path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise ConfigurationError(msg, {"file_path": str(config_path)})

    try:
        with config_path.open("r", encoding="utf-8") as f:
            raw_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]  # YAML boundary
    except yaml.YAMLError as e:
        msg = (
            f"Failed to parse YAML configuration file: {config_path}\n"
            f"YAML parsing error: {e}\n"
            f"Please check the file for syntax errors."
        )
        raise ConfigurationError(msg, {"file_path": str(config_path)}) from e
    except OSError as e:
        msg = f"Failed to read configuration file: {config_path}\nError: {e}\nPlease check file permissions."
        raise ConfigurationError(msg, {"file_path": str(config_path)}) from e

    if raw_data is None:
        return {}
    if not isinstance(raw_data, dict):
        msg = (
            f"Invalid configuration file format: {config_path}\n"
            f"Expected YAML dictionary at root level, got: {type(raw_data).__name__}"
        )
        raise ConfigurationError(msg, {"file_path": str(config_path)})

    return resolve_env_vars_in_dict(raw_data)  # pyright: ignore[reportUnknownArgumentType]  # YAML boundary


def load_config(
    config_path: Path | None = None,
    *,
    overrides: Mapping[str, object] | None = None,
) -> NotifierConfig:
    """Build the validated command-line configuration.

    Values from ``overrides`` that are not None replace values read from the
    file.

    Args:
        config_path: Optional YAML configuration file
        overrides: Values given on the command line

    Returns:
        Validated NotifierConfig

    Raises:
        ConfigurationError: If loading or validation fails
    """
    data: dict[str, object] = read_config_file(config_path) if config_path is not None else {}
    if overrides:
        data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return NotifierConfig.model_validate(data)
    except ValidationError as e:
        error_lines = ["Configuration validation failed:", ""]
        for error in e.errors():
            field_path = " → ".join(str(loc) for loc in error["loc"]) or "(root)"
            error_lines.append(f"  Field: {field_path}")
            error_lines.append(f"  Error: {error['msg']}")
            error_lines.append("")
        if config_path is not None:
            error_lines.append(f"Configuration file: {config_path}")

        raise ConfigurationError(
            "\n".join(error_lines).rstrip(),
            {"validation_errors": [dict(err) for err in e.errors()]},
        ) from e
