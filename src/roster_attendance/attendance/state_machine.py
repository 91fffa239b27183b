"""Attendance status machine.

ABSENT -> FIRST_SESSION_ACTIVE -> FIRST_CHECK_OUT -> SECOND_SESSION_ACTIVE -> COMPLETED

Each transition is driven by exactly one new timestamp, which may not be
earlier than anything already on the record. A day that ends in
FIRST_CHECK_OUT is reported as CHECKED_OUT.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, CheckAction, EventType
from ..core.exceptions import DayCompletedError, OutOfOrderEventError
from .model import AttendanceTimestamps

STATUS_AFTER = {
    EventType.FIRST_CHECK_IN: AttendanceStatus.FIRST_SESSION_ACTIVE,
    EventType.FIRST_CHECK_OUT: AttendanceStatus.FIRST_CHECK_OUT,
    EventType.SECOND_CHECK_IN: AttendanceStatus.SECOND_SESSION_ACTIVE,
    EventType.SECOND_CHECK_OUT: AttendanceStatus.COMPLETED,
}

EXPECTED_EVENT = {
    AttendanceStatus.ABSENT: EventType.FIRST_CHECK_IN,
    AttendanceStatus.FIRST_SESSION_ACTIVE: EventType.FIRST_CHECK_OUT,
    AttendanceStatus.FIRST_CHECK_OUT: EventType.SECOND_CHECK_IN,
    AttendanceStatus.SECOND_SESSION_ACTIVE: EventType.SECOND_CHECK_OUT,
}

_ACTION_EVENTS = {
    CheckAction.CHECK_IN: (EventType.FIRST_CHECK_IN, EventType.SECOND_CHECK_IN),
    CheckAction.CHECK_OUT: (EventType.FIRST_CHECK_OUT, EventType.SECOND_CHECK_OUT),
}


def derive_status(ts: AttendanceTimestamps) -> AttendanceStatus:
    recorded = ts.recorded()
    if not recorded:
        return AttendanceStatus.ABSENT
    last_event, _ = recorded[-1]
    return STATUS_AFTER[last_event]


def reported_status(status: AttendanceStatus, work_date: date, today: date) -> AttendanceStatus:
    """Status as shown to reports once the day is over."""

    if status == AttendanceStatus.FIRST_CHECK_OUT and work_date < today:
        return AttendanceStatus.CHECKED_OUT
    return status


def validate_order(ts: AttendanceTimestamps) -> None:
    """Raise if the recorded timestamps are not first-in <= first-out <= second-in <= second-out."""

    previous: Optional[datetime] = None
    gap = False
    for event in EventType:
        at = ts.get(event)
        if at is None:
            gap = True
            continue
        if gap:
            raise OutOfOrderEventError(f"{event.value} is recorded but an earlier event is missing")
        if previous is not None and at < previous:
            raise OutOfOrderEventError(f"{event.value} is earlier than the previous event")
        previous = at


def apply_event(ts: AttendanceTimestamps, event: EventType, at: datetime) -> AttendanceTimestamps:
    """Record one event, returning the new timestamps.

    Re-submitting the event that produced the current state is a no-op.
    """

    status = derive_status(ts)
    if ts.get(event) is not None and STATUS_AFTER[event] == status:
        return ts

    expected = EXPECTED_EVENT.get(status)
    if expected is None:
        raise DayCompletedError("Attendance for this day is already completed")
    if event != expected:
        raise OutOfOrderEventError(f"{event.value} cannot follow {status.value}; expected {expected.value}")

    latest = ts.latest()
    if latest is not None and at < latest:
        raise OutOfOrderEventError(f"{event.value} at {at:%H:%M:%S} is earlier than {latest:%H:%M:%S}")

    return ts.with_event(event, at)


def event_for_action(status: AttendanceStatus, action: CheckAction) -> Optional[EventType]:
    """Concrete event for a check-in/check-out action, or None when it changes nothing."""

    action = CheckAction(action)
    if status == AttendanceStatus.COMPLETED:
        if action == CheckAction.CHECK_IN:
            raise DayCompletedError("Attendance for this day is already completed")
        return None

    expected = EXPECTED_EVENT[status]
    if expected in _ACTION_EVENTS[action]:
        return expected

    if status == AttendanceStatus.ABSENT:
        raise OutOfOrderEventError("Cannot check out before checking in")
    return None
