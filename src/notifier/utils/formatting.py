"""Duration parsing for command-line and configuration values.

Accepts Go-style duration strings ("300ms", "5s", "1m30s", "1h") as well as
plain numbers, which are read as seconds.

Examples:
    >>> parse_duration("5s")
    5.0
    >>> parse_duration("1m30s")
    90.0
    >>> parse_duration("250ms")
    0.25
    >>> parse_duration("2.5")
    2.5
"""

import math
import re
from typing import Final

# Seconds per unit suffix
_UNIT_SECONDS: Final[dict[str, float]] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT_PATTERN: Final[re.Pattern[str]] = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(value: str) -> float:
    """Parse a duration string into seconds.

    Args:
        value: Duration such as "5s", "1m30s", "500ms" or a bare number of seconds

    Returns:
        Duration in seconds

    Raises:
        ValueError: If the string is not a valid non-negative duration
    """
    text = value.strip()
    if not text:
        msg = "Duration must not be empty"
        raise ValueError(msg)

    try:
        seconds = float(text)
    except ValueError:
        pass
    else:
        if not math.isfinite(seconds):
            msg = f"Invalid duration: {value!r}"
            raise ValueError(msg)
        if seconds < 0:
            msg = f"Duration must not be negative: {value!r}"
            raise ValueError(msg)
        return seconds

    total = 0.0
    position = 0
    for match in _COMPONENT_PATTERN.finditer(text):
        if match.start() != position:
            break
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        position = match.end()

    if position != len(text) or position == 0:
        msg = f"Invalid duration: {value!r}"
        raise ValueError(msg)
    return total
