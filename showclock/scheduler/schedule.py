"""Time-of-day utilities.

Converts epoch milliseconds to seconds-of-day on the wall clock and decides
whether a daily threshold was crossed between two consecutive samples.
"""
import math
import time
from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..errors import ValidationError

SECONDS_PER_DAY = 24 * 60 * 60


def now_ms() -> int:
    """Get current timestamp in milliseconds."""
    return int(time.time() * 1000)


def resolve_timezone(name: str | None) -> tzinfo | None:
    """Look up an IANA zone name, None meaning the system local zone.

    Raises:
        ValidationError: The zone name is unknown
    """
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValidationError(f"Unknown timezone: {name!r}", detail={"timezone": name}) from e


def time_of_day_seconds(millis: int, tz: tzinfo | None = None) -> int:
    """Seconds since local midnight for an epoch timestamp.

    Args:
        millis: Unix timestamp in milliseconds
        tz: Zone of the wall clock, or None for the system local zone

    Returns:
        Value in [0, 86399]
    """
    dt = datetime.fromtimestamp(millis / 1000, tz=tz)
    return 3600 * dt.hour + 60 * dt.minute + dt.second


def frame_window(
    now_millis: int,
    delta_ms: float,
    tz: tzinfo | None = None,
) -> tuple[int, int]:
    """Seconds-of-day of the previous and current frame.

    The previous frame is ``now - ceil(delta_ms)``.
    """
    prev_sec = time_of_day_seconds(now_millis - math.ceil(delta_ms), tz)
    cur_sec = time_of_day_seconds(now_millis, tz)
    return prev_sec, cur_sec


def is_crossing(threshold: int, prev_sec: int, cur_sec: int) -> bool:
    """Whether a daily threshold was crossed going from prev_sec to cur_sec.

    Midnight (threshold 0) can never satisfy ``prev < 0``, so it fires on the
    day rollover instead, when the clock goes backwards between frames.
    Everything else fires on the half-open interval ``(prev, cur]``.

    A threshold is only seen if the frame that crosses it is sampled, so
    ticks longer than the gap between two thresholds are not caught up.
    """
    if threshold == 0:
        return cur_sec >= threshold and prev_sec > cur_sec
    return prev_sec < threshold <= cur_sec


def seconds_until(threshold: int, cur_sec: int) -> int:
    """Seconds from cur_sec until the threshold next occurs, wrapping past midnight."""
    delta = (threshold - cur_sec) % SECONDS_PER_DAY
    return delta or SECONDS_PER_DAY


def parse_time_of_day(text: str) -> tuple[int, int, int]:
    """Parse "HH:MM" or "HH:MM:SS" into (hours, minutes, seconds).

    Raises:
        ValidationError: The text is not a valid time of day
    """
    parts = text.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise ValidationError(f"Invalid time of day: {text!r}, expected HH:MM[:SS]")

    hours, minutes = int(parts[0]), int(parts[1])
    seconds = int(parts[2]) if len(parts) == 3 else 0
    if hours > 23 or minutes > 59 or seconds > 59:
        raise ValidationError(f"Time of day out of range: {text!r}")
    return hours, minutes, seconds


def seconds_to_human(seconds: int) -> str:
    """Convert a duration to a short human-readable description.

    Args:
        seconds: Duration in seconds

    Returns:
        e.g. "45s", "12m 5s", "3h 20m"
    """
    if seconds < 60:
        return f"{seconds}s"
    elif seconds < 3600:
        minutes, secs = divmod(seconds, 60)
        return f"{minutes}m {secs}s" if secs else f"{minutes}m"
    else:
        hours, rem = divmod(seconds, 3600)
        minutes = rem // 60
        return f"{hours}h {minutes}m" if minutes else f"{hours}h"
