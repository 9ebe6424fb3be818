"""HH:MM:SS time string parsing."""

import math

from cliptrim.errors import InvalidTimeComponent, InvalidTimeFormat, InvalidTimeRange
from cliptrim.models import TimeRange

_FIELDS = ("hours", "minutes", "seconds")


def parse_time(value: str) -> float:
    """Convert an ``HH:MM:SS`` string to total seconds.

    Each field may be fractional (``00:00:05.5``). Raises InvalidTimeFormat
    unless there are exactly three fields and InvalidTimeComponent when a
    field is not a non-negative number.
    """
    parts = value.strip().split(":")
    if len(parts) != 3:
        raise InvalidTimeFormat(f"Invalid time format: {value!r}. Expected HH:MM:SS")

    numbers: list[float] = []
    for name, part in zip(_FIELDS, parts):
        try:
            number = float(part)
        except ValueError:
            raise InvalidTimeComponent(f"Invalid {name} in {value!r}: {part!r}") from None
        if number < 0 or not math.isfinite(number):
            raise InvalidTimeComponent(f"Invalid {name} in {value!r}: {part!r}")
        numbers.append(number)

    hours, minutes, seconds = numbers
    return hours * 3600.0 + minutes * 60.0 + seconds


def parse_range(start: str, end: str) -> TimeRange:
    """Parse a start/end pair, rejecting ranges that end before they start."""
    start_s = parse_time(start)
    end_s = parse_time(end)
    if end_s < start_s:
        raise InvalidTimeRange(f"End time {end} is before start time {start}")
    return TimeRange(start=start_s, end=end_s, start_text=start.strip(), end_text=end.strip())


def format_seconds(value: float) -> str:
    """Render seconds compactly: ``5.0`` -> ``"5"``, ``5.25`` -> ``"5.25"``."""
    if value == int(value):
        return str(int(value))
    return repr(value)
