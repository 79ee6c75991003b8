"""Pure time-of-day arithmetic on HH:MM strings.

All functions are side-effect free. Times are 24-hour wall-clock values on a
single calendar day; midnight wraparound is not supported.
"""

import math
import re
from datetime import datetime, time

from daytrip.app.errors import TimeFormatError

MINUTES_PER_DAY = 24 * 60

_HHMM_RE = re.compile(r"([01]\d|2[0-3]):([0-5]\d)")


def parse_hhmm(value: str) -> int:
    """Parse an HH:MM string into minutes since midnight.

    Raises:
        TimeFormatError: If value is not a valid 24-hour HH:MM string
    """
    match = _HHMM_RE.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        raise TimeFormatError(f"invalid HH:MM time: {value!r}")
    return int(match.group(1)) * 60 + int(match.group(2))


def minute_of_day(now: datetime | time) -> float:
    """Wall-clock minute of day, seconds included as a fraction."""
    return now.hour * 60 + now.minute + (now.second + now.microsecond / 1_000_000) / 60


def format_minutes(n: int) -> str:
    """Render a minute count as "Xh Ym", or "Ym" when under an hour."""
    if n < 0:
        raise ValueError(f"minutes must be non-negative, got {n}")
    hours, minutes = divmod(int(n), 60)
    if hours == 0:
        return f"{minutes}m"
    return f"{hours}h {minutes}m"


def duration(start: str, end: str) -> str:
    """Human-readable span between two times (e.g. "1h 30m").

    Raises:
        ValueError: If start is not strictly before end
    """
    span = parse_hhmm(end) - parse_hhmm(start)
    if span <= 0:
        raise ValueError(f"start must be before end: {start} >= {end}")
    return format_minutes(span)


def gap(prev_end: str, next_start: str) -> int:
    """Minutes between the end of one activity and the start of the next.

    Overlapping or mis-ordered entries yield 0, never a negative value.
    """
    return max(0, parse_hhmm(next_start) - parse_hhmm(prev_end))


def time_progress(start: str, end: str, now: datetime | time) -> int:
    """Percentage of [start, end] elapsed at now, as an integer in [0, 100].

    0 at or before start, 100 at or after end, floor of the linear
    interpolation in between.
    """
    start_min = parse_hhmm(start)
    end_min = parse_hhmm(end)
    current = minute_of_day(now)

    if current <= start_min:
        return 0
    if current >= end_min:
        return 100

    pct = math.floor((current - start_min) / (end_min - start_min) * 100)
    return min(100, max(0, pct))


def format_countdown(remaining_ms: int) -> str:
    """Render a positive millisecond span as "HHh MMm SSs"."""
    total_seconds = max(0, remaining_ms) // 1000
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}h {minutes:02d}m {seconds:02d}s"
