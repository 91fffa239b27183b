from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, EventType


@dataclass(frozen=True)
class AttendanceTimestamps:
    """The up to four check events of one employee-day, in chronological order."""

    first_check_in: Optional[datetime] = None
    first_check_out: Optional[datetime] = None
    second_check_in: Optional[datetime] = None
    second_check_out: Optional[datetime] = None

    def get(self, event: EventType) -> Optional[datetime]:
        return getattr(self, event.value)

    def with_event(self, event: EventType, at: datetime) -> "AttendanceTimestamps":
        return replace(self, **{event.value: at})

    def recorded(self) -> list[tuple[EventType, datetime]]:
        return [(e, self.get(e)) for e in EventType if self.get(e) is not None]

    def latest(self) -> Optional[datetime]:
        present = [at for _, at in self.recorded()]
        return max(present) if present else None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar date."""

    attendance_id: Optional[int]
    employee_id: int
    work_date: date
    first_check_in_time: Optional[datetime] = None
    first_check_out_time: Optional[datetime] = None
    second_check_in_time: Optional[datetime] = None
    second_check_out_time: Optional[datetime] = None
    status: AttendanceStatus = AttendanceStatus.ABSENT
    minutes_late: int = 0
    early_departure_minutes: Optional[int] = None
    working_duration_minutes: int = 0
    break_duration_minutes: int = 0
    roster_id: Optional[int] = None
    note: Optional[str] = None

    @property
    def timestamps(self) -> AttendanceTimestamps:
        return AttendanceTimestamps(
            first_check_in=self.first_check_in_time,
            first_check_out=self.first_check_out_time,
            second_check_in=self.second_check_in_time,
            second_check_out=self.second_check_out_time,
        )

    def with_timestamps(self, ts: AttendanceTimestamps) -> "AttendanceRecord":
        return replace(
            self,
            first_check_in_time=ts.first_check_in,
            first_check_out_time=ts.first_check_out,
            second_check_in_time=ts.second_check_in,
            second_check_out_time=ts.second_check_out,
        )

    @property
    def is_late(self) -> bool:
        return self.minutes_late > 0

    def copy(self, **changes) -> "AttendanceRecord":
        return replace(self, **changes)


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reports: a record joined with its employee and department."""

    record: AttendanceRecord
    full_name: str
    department_id: Optional[int]
    department_name: Optional[str] = None

    @property
    def employee_id(self) -> int:
        return self.record.employee_id


