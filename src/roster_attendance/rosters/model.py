from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Optional

from ..core.enums import OverrideScope, ScheduleSource


@dataclass(frozen=True)
class Roster:
    """A date-ranged work schedule assigned to an employee.

    start_time/end_time/shift_pattern hold the values as stored; they are only
    parsed when the roster is resolved for a date, so bad data in one roster
    cannot break loading.
    grace_period is optional: None means the column is absent or NULL.
    """

    roster_id: int
    employee_id: int
    start_date: date
    end_date: date
    start_time: Any
    end_time: Any
    break_duration: int = 0
    early_departure_threshold: int = 0
    grace_period: Optional[int] = None
    is_active: bool = True
    shift_pattern: Any = None
    created_at: Optional[datetime] = None
    department_id: Optional[int] = None
    name: Optional[str] = None

    def covers(self, work_date: date) -> bool:
        return self.is_active and self.start_date <= work_date <= self.end_date


@dataclass(frozen=True)
class TimeSlot:
    start_time: Any = None
    end_time: Any = None


@dataclass(frozen=True)
class ShiftPatternEntry:
    """One per-day override inside a roster's shift pattern.

    day uses 0 = Sunday .. 6 = Saturday. An entry with neither day nor date
    applies to every date of the roster.
    """

    day: Optional[int] = None
    date: Optional[date] = None
    time_slot: Optional[TimeSlot] = None
    shift: Optional[str] = None

    @property
    def is_off(self) -> bool:
        return (self.shift or "").lower() == "off"


@dataclass(frozen=True)
class ScheduleOverride:
    """Stored per-employee or per-department start/end time exception."""

    override_id: int
    scope: OverrideScope
    target_id: int
    start_time: time
    end_time: Optional[time]
    effective_from: date
    effective_until: Optional[date] = None
    is_active: bool = True
    reason: Optional[str] = None

    def covers(self, work_date: date) -> bool:
        if not self.is_active or work_date < self.effective_from:
            return False
        return self.effective_until is None or work_date <= self.effective_until


@dataclass(frozen=True)
class ResolvedRoster:
    """A roster as it applies to one work date.

    start_time/end_time are None when the stored values could not be parsed;
    the reasons are kept in problems.
    """

    roster: Roster
    work_date: date
    start_time: Optional[time]
    end_time: Optional[time]
    grace_period: int = 0
    early_departure_threshold: int = 0
    break_duration: int = 0
    is_day_off: bool = False
    source: ScheduleSource = ScheduleSource.ROSTER
    problems: tuple[str, ...] = ()

    @property
    def roster_id(self) -> int:
        return self.roster.roster_id

    @property
    def expected_minutes(self) -> int:
        """Scheduled working minutes for the day, break excluded."""

        if self.is_day_off or self.start_time is None or self.end_time is None:
            return 0
        start = self.start_time.hour * 60 + self.start_time.minute
        end = self.end_time.hour * 60 + self.end_time.minute
        return max(0, end - start - int(self.break_duration or 0))

    def to_dict(self) -> dict:
        def _fmt(t: Optional[time]) -> Optional[str]:
            return t.strftime("%H:%M") if t else None

        return {
            "roster_id": self.roster_id,
            "employee_id": self.roster.employee_id,
            "work_date": self.work_date.strftime("%Y-%m-%d"),
            "start_time": _fmt(self.start_time),
            "end_time": _fmt(self.end_time),
            "grace_period": self.grace_period,
            "early_departure_threshold": self.early_departure_threshold,
            "break_duration": self.break_duration,
            "is_day_off": self.is_day_off,
            "source": self.source.value,
            "expected_minutes": self.expected_minutes,
            "problems": list(self.problems),
        }
