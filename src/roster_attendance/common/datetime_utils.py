from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Callable, Optional

from ..core.exceptions import MalformedScheduleError

Clock = Callable[[], datetime]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into a naive wall-clock datetime."""
    parsed = datetime.fromisoformat(value)
    return parsed.replace(tzinfo=None)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def parse_wall_time(value: Any) -> time:
    """Normalize a wall-clock time value.

    Accepts what storage hands back for a schedule time:
    - datetime.time
    - datetime.timedelta (mysql-connector TIME columns)
    - string 'HH:MM' or 'HH:MM:SS'
    """

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds())
        if total_seconds < 0 or total_seconds >= 86400:
            raise MalformedScheduleError(f"Time out of range: {value!r}")
        return time(hour=total_seconds // 3600, minute=(total_seconds % 3600) // 60, second=total_seconds % 60)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
            raise MalformedScheduleError(f"Invalid time string: {value!r}")
        try:
            return time(*(int(p) for p in parts))
        except ValueError as exc:
            raise MalformedScheduleError(f"Invalid time string: {value!r}") from exc

    raise MalformedScheduleError(f"Unsupported time value type: {type(value)!r}")


def at_wall_time(day: date, value: time) -> datetime:
    return datetime.combine(day, value)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, truncated toward zero."""
    seconds = int((end - start).total_seconds())
    return int(seconds / 60)


def format_hhmm(minutes: Optional[int]) -> str:
    if minutes is None:
        return "-"
    minutes = max(int(minutes), 0)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
