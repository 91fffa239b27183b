from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Canonical attendance states stored on a record."""

    ABSENT = "ABSENT"
    FIRST_SESSION_ACTIVE = "FIRST_SESSION_ACTIVE"
    FIRST_CHECK_OUT = "FIRST_CHECK_OUT"
    SECOND_SESSION_ACTIVE = "SECOND_SESSION_ACTIVE"
    COMPLETED = "COMPLETED"
    # Reported only: the day ended in FIRST_CHECK_OUT without a second session.
    CHECKED_OUT = "CHECKED_OUT"


class EventType(str, Enum):
    """The four timestamps an attendance record can receive, in order."""

    FIRST_CHECK_IN = "first_check_in"
    FIRST_CHECK_OUT = "first_check_out"
    SECOND_CHECK_IN = "second_check_in"
    SECOND_CHECK_OUT = "second_check_out"


class CheckAction(str, Enum):
    """What the employee actually did at the terminal."""

    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class OverrideScope(str, Enum):
    EMPLOYEE = "employee"
    DEPARTMENT = "department"


class ScheduleSource(str, Enum):
    """Where the effective start/end times of a resolved roster came from."""

    ROSTER = "roster"
    SHIFT_PATTERN = "shift_pattern"
    EMPLOYEE_OVERRIDE = "employee_override"
    DEPARTMENT_OVERRIDE = "department_override"


class RosterTieBreak(str, Enum):
    """How to pick one roster when several active rosters cover a date."""

    LATEST_CREATED = "latest_created"
    EARLIEST_CREATED = "earliest_created"
    REJECT = "reject"


class LateSeverity(str, Enum):
    NONE = "none"
    MINOR = "minor"
    MAJOR = "major"
    CRITICAL = "critical"
