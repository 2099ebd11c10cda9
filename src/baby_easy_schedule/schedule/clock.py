"""HH:MM wall-clock arithmetic. Times are minutes from midnight."""

import re

from baby_easy_schedule.errors import ScheduleError

MINUTES_IN_DAY = 1440

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_time(value: str) -> int:
    """Parse HH:MM into minutes from midnight. Raises ScheduleError when invalid."""
    match = _TIME_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ScheduleError(f"Invalid time {value!r}, expected HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ScheduleError(f"Invalid time {value!r}, expected HH:MM")
    return hours * 60 + minutes


def is_valid_time(value: str) -> bool:
    try:
        parse_time(value)
    except ScheduleError:
        return False
    return True


def format_time(minutes: int) -> str:
    """Minutes (any integer, wraps at midnight) to HH:MM."""
    normalized = minutes % MINUTES_IN_DAY
    return f"{normalized // 60:02d}:{normalized % 60:02d}"


def add_minutes(time_str: str, minutes: int) -> str:
    """Add minutes to an HH:MM time, wrapping past midnight."""
    return format_time(parse_time(time_str) + minutes)


def duration_between(start: str, end: str) -> int:
    """Minutes from start to end. An end before start is taken as the next day."""
    start_minutes = parse_time(start)
    end_minutes = parse_time(end)
    if end_minutes < start_minutes:
        end_minutes += MINUTES_IN_DAY
    return end_minutes - start_minutes


def format_duration(minutes: int) -> str:
    """Compact duration: 45m, 2h, 1h30m."""
    if minutes < 60:
        return f"{minutes}m"
    hours, mins = divmod(minutes, 60)
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h{mins}m"
