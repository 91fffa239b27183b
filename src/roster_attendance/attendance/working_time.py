from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..common.datetime_utils import minutes_between
from .model import AttendanceTimestamps


@dataclass(frozen=True)
class WorkingTime:
    break_minutes: int
    worked_minutes: int

    @property
    def worked_hours(self) -> float:
        return self.worked_minutes / 60


def _session_minutes(start: Optional[datetime], end: Optional[datetime], now: datetime) -> int:
    if start is None:
        return 0
    # An open session runs until now.
    return max(0, minutes_between(start, end or now))


def working_time(ts: AttendanceTimestamps, *, now: datetime, work_date: Optional[date] = None) -> WorkingTime:
    """Break between the two sessions and total time worked in them.

    The roster's break_duration plays no part; only recorded events count.
    With work_date given, an open session never runs past midnight of that day.
    """

    if work_date is not None:
        now = min(now, datetime.combine(work_date + timedelta(days=1), time.min))

    break_minutes = 0
    if ts.first_check_out and ts.second_check_in and ts.second_check_in > ts.first_check_out:
        break_minutes = minutes_between(ts.first_check_out, ts.second_check_in)

    worked = _session_minutes(ts.first_check_in, ts.first_check_out, now)
    worked += _session_minutes(ts.second_check_in, ts.second_check_out, now)
    return WorkingTime(break_minutes=max(break_minutes, 0), worked_minutes=max(worked, 0))
