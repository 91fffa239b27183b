from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.constants import DAY_OFF_NOTE, ROSTER_MISSING_NOTE
from ..core.enums import AttendanceStatus
from ..rosters.model import ResolvedRoster
from .lateness import early_departure_minutes, late_minutes
from .model import AttendanceRecord, AttendanceTimestamps
from .state_machine import derive_status
from .working_time import working_time

_SYSTEM_NOTES = {ROSTER_MISSING_NOTE, DAY_OFF_NOTE}


def closing_check_out(ts: AttendanceTimestamps, status: AttendanceStatus) -> Optional[datetime]:
    """The check-out that ends the working day so far, if the day is not mid-session."""

    if status == AttendanceStatus.COMPLETED:
        return ts.second_check_out
    if status == AttendanceStatus.FIRST_CHECK_OUT:
        return ts.first_check_out
    return None


def derive_fields(record: AttendanceRecord, roster: Optional[ResolvedRoster], *, now: datetime) -> AttendanceRecord:
    """Recompute status and every time metric of a record from its timestamps."""

    ts = record.timestamps
    status = derive_status(ts)
    worked = working_time(ts, now=now, work_date=record.work_date)

    closing = closing_check_out(ts, status)
    early = early_departure_minutes(closing, roster) if closing is not None else None

    note = record.note
    if note is None or note in _SYSTEM_NOTES:
        if roster is None:
            note = ROSTER_MISSING_NOTE
        elif roster.is_day_off:
            note = DAY_OFF_NOTE
        else:
            note = None

    return record.copy(
        status=status,
        minutes_late=late_minutes(ts.first_check_in, roster),
        early_departure_minutes=early,
        working_duration_minutes=worked.worked_minutes,
        break_duration_minutes=worked.break_minutes,
        roster_id=record.roster_id if record.roster_id is not None else (roster.roster_id if roster else None),
        note=note,
    )
