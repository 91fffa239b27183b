"""Lateness and early-departure minutes against a resolved roster.

This is the only lateness implementation; services, recalculation and
reports all call into it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import at_wall_time
from ..core.constants import MAJOR_LATE_MINUTES, MINOR_LATE_MINUTES
from ..core.enums import LateSeverity
from ..rosters.model import ResolvedRoster


def _minutes_beyond(seconds: int, tolerance_minutes: int) -> int:
    return max(0, seconds - max(int(tolerance_minutes or 0), 0) * 60) // 60


def late_minutes(check_in: Optional[datetime], roster: Optional[ResolvedRoster]) -> int:
    """Minutes late after the grace period, floored; 0 when not scheduled.

    The roster start is placed on the check-in's own calendar date.
    """

    if check_in is None or roster is None or roster.is_day_off or roster.start_time is None:
        return 0
    start = at_wall_time(check_in.date(), roster.start_time)
    return _minutes_beyond(int((check_in - start).total_seconds()), roster.grace_period)


def early_departure_minutes(check_out: Optional[datetime], roster: Optional[ResolvedRoster]) -> int:
    """Minutes left before roster end beyond the early-departure threshold."""

    if check_out is None or roster is None or roster.is_day_off or roster.end_time is None:
        return 0
    end = at_wall_time(check_out.date(), roster.end_time)
    return _minutes_beyond(int((end - check_out).total_seconds()), roster.early_departure_threshold)


def is_late(minutes: Optional[int]) -> bool:
    return bool(minutes) and int(minutes) > 0


def late_severity(minutes: Optional[int]) -> LateSeverity:
    if not is_late(minutes):
        return LateSeverity.NONE
    if minutes <= MINOR_LATE_MINUTES:
        return LateSeverity.MINOR
    if minutes <= MAJOR_LATE_MINUTES:
        return LateSeverity.MAJOR
    return LateSeverity.CRITICAL


def format_late_minutes(minutes: Optional[int]) -> str:
    """'-' when on time, '45M' under an hour, '1H 05M' otherwise."""

    if not is_late(minutes):
        return "-"
    hours, rest = divmod(int(minutes), 60)
    if hours:
        return f"{hours}H {rest:02d}M"
    return f"{rest}M"
