"""Parsing of user-facing duration and size strings.

Durations are expressed in days (``30d``, ``2w``, ``3m``, ``1y``),
ranges join two durations with a single hyphen (``30d-90d``), and
sizes accept an optional binary unit (``500MB``, ``1.5GB``, ``2048``).
"""

import math
import re
from dataclasses import dataclass

_DURATION_RE = re.compile(r"([0-9]+)([dwmy])", re.IGNORECASE)
_SIZE_RE = re.compile(r"([0-9]+(?:\.[0-9]+)?)\s*(B|KB|MB|GB|TB)?", re.IGNORECASE | re.ASCII)

# Days per duration unit
DURATION_MULTIPLIERS: dict[str, int] = {
    "d": 1,
    "w": 7,
    "m": 30,
    "y": 365,
}

# Bytes per size unit (base 1024)
SIZE_MULTIPLIERS: dict[str, int] = {
    "B": 1,
    "KB": 1024,
    "MB": 1024**2,
    "GB": 1024**3,
    "TB": 1024**4,
}


class InvalidFormatError(ValueError):
    """Raised when a duration, range, or size string is malformed."""


@dataclass(frozen=True, slots=True)
class DurationRange:
    """Inclusive age range in days.

    Attributes:
        min: Lower bound in days.
        max: Upper bound in days.
    """

    min: int
    max: int


def parse_duration(value: str) -> int:
    """Parse a duration string into a number of days.

    Args:
        value: Duration such as "30d", "4w", "3m" or "1y".

    Returns:
        Number of days.

    Raises:
        InvalidFormatError: If the string is not <integer><unit>.
    """
    match = _DURATION_RE.fullmatch(value)
    if not match:
        msg = f"Invalid duration format: {value!r}. Use a format like 30d, 4w, 3m, 1y"
        raise InvalidFormatError(msg)

    amount = int(match.group(1))
    unit = match.group(2).lower()
    return amount * DURATION_MULTIPLIERS[unit]


def parse_duration_range(value: str) -> DurationRange:
    """Parse a duration range such as "30d-90d".

    Args:
        value: Two durations separated by exactly one hyphen.

    Returns:
        DurationRange with both bounds in days.

    Raises:
        InvalidFormatError: If there are not exactly two halves, or
            either half is not a valid duration.
    """
    parts = value.split("-")
    if len(parts) != 2:
        msg = f"Invalid range format: {value!r}. Use a format like 30d-90d"
        raise InvalidFormatError(msg)

    return DurationRange(min=parse_duration(parts[0]), max=parse_duration(parts[1]))


def parse_size(value: str) -> int:
    """Parse a size string into bytes.

    Args:
        value: Size such as "500MB", "1kb" or "2048" (bytes when no unit).

    Returns:
        Size in bytes, truncated to an integer.

    Raises:
        InvalidFormatError: If the string is not <number><unit>?.
    """
    match = _SIZE_RE.fullmatch(value)
    if not match:
        msg = f"Invalid size format: {value!r}. Use a format like 500MB or 1GB"
        raise InvalidFormatError(msg)

    amount = float(match.group(1))
    unit = (match.group(2) or "B").upper()
    return math.floor(amount * SIZE_MULTIPLIERS[unit])
