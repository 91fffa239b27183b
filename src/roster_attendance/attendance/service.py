from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import Clock, format_hhmm, now_local
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import CheckAction, EventType
from ..core.exceptions import ReferentialIntegrityError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..rosters.model import ResolvedRoster
from ..rosters.resolver import RosterResolver
from .lateness import format_late_minutes, late_severity
from .metrics import derive_fields
from .model import AttendanceRecord, AttendanceTimestamps
from .repository import AttendanceRepository
from .state_machine import apply_event, derive_status, event_for_action, reported_status, validate_order

logger = logging.getLogger(__name__)


def attendance_view(record: AttendanceRecord, *, today: date) -> dict:
    """Fields handed to reporting/rendering collaborators."""

    def _t(value: Optional[datetime]) -> str:
        return value.strftime("%H:%M") if value else "-"

    return {
        "attendance_id": record.attendance_id,
        "employee_id": record.employee_id,
        "work_date": record.work_date.strftime("%Y-%m-%d"),
        "first_check_in": _t(record.first_check_in_time),
        "first_check_out": _t(record.first_check_out_time),
        "second_check_in": _t(record.second_check_in_time),
        "second_check_out": _t(record.second_check_out_time),
        "status": reported_status(record.status, record.work_date, today).value,
        "minutes_late": record.minutes_late,
        "late_display": format_late_minutes(record.minutes_late),
        "late_severity": late_severity(record.minutes_late).value,
        "early_departure_minutes": record.early_departure_minutes,
        "working_duration_minutes": record.working_duration_minutes,
        "worked_hours": format_hhmm(record.working_duration_minutes),
        "break_duration_minutes": record.break_duration_minutes,
        "roster_id": record.roster_id,
        "note": record.note or "",
    }


@dataclass(frozen=True)
class CorrectionRequest:
    """Full replacement of a record's timestamps, used for admin edits."""

    first_check_in: Optional[datetime] = None
    first_check_out: Optional[datetime] = None
    second_check_in: Optional[datetime] = None
    second_check_out: Optional[datetime] = None
    note: Optional[str] = None


class AttendanceService:
    """Write boundary for check events.

    Every event is persisted first and its derived metrics recomputed and
    persisted right after, within the same call.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        resolver: RosterResolver,
        *,
        clock: Clock = now_local,
    ):
        self._attendance = attendance
        self._employees = employees
        self._resolver = resolver
        self._clock = clock

    def check_in(self, employee_id: int, *, at: Optional[datetime] = None, now: Optional[datetime] = None) -> AttendanceRecord:
        return self.record_action(employee_id, CheckAction.CHECK_IN, at=at, now=now)

    def check_out(self, employee_id: int, *, at: Optional[datetime] = None, now: Optional[datetime] = None) -> AttendanceRecord:
        return self.record_action(employee_id, CheckAction.CHECK_OUT, at=at, now=now)

    def record_action(
        self,
        employee_id: int,
        action: CheckAction,
        *,
        at: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """Map a check-in/check-out to the next first/second session event."""

        now = now or self._clock()
        at = at or now
        employee = self._require_employee(employee_id)
        record = self._load_or_new(employee.employee_id, at.date())

        event = event_for_action(derive_status(record.timestamps), action)
        if event is None:
            return record
        return self._apply(employee, record, event, at, now=now)

    def record_event(
        self,
        employee_id: int,
        event: EventType,
        at: datetime,
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """Record an explicit event type, e.g. when importing terminal logs."""

        employee = self._require_employee(employee_id)
        record = self._load_or_new(employee.employee_id, at.date())
        return self._apply(employee, record, EventType(event), at, now=now or self._clock())

    def correct_record(
        self,
        attendance_id: int,
        correction: CorrectionRequest,
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise ValidationError("Attendance record does not exist")

        ts = AttendanceTimestamps(
            first_check_in=correction.first_check_in,
            first_check_out=correction.first_check_out,
            second_check_in=correction.second_check_in,
            second_check_out=correction.second_check_out,
        )
        validate_order(ts)
        for _, at in ts.recorded():
            if at.date() != record.work_date:
                raise ValidationError("Corrected times must fall on the record's date")

        employee = self._require_employee(record.employee_id)
        updated = record.with_timestamps(ts).copy(status=derive_status(ts), note=correction.note or record.note)
        self._attendance.upsert_attendance(updated)
        logger.info("Attendance %s corrected", attendance_id)
        roster = self._resolve_for_record(updated, department_id=employee.department_id)
        return self._refresh_metrics(updated, roster, now=now or self._clock())

    def recompute(
        self,
        record: AttendanceRecord,
        *,
        department_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """Re-derive metrics of an already stored record against its roster."""

        roster = self._resolve_for_record(record, department_id=department_id)
        return self._refresh_metrics(record, roster, now=now or self._clock())

    def get_day(self, employee_id: int, work_date: date, *, now: Optional[datetime] = None) -> Optional[dict]:
        record = self._attendance.get_for_employee_and_date(int(employee_id), work_date)
        if not record:
            return None
        return attendance_view(record, today=(now or self._clock()).date())

    def get_history(self, employee_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT, now: Optional[datetime] = None):
        today = (now or self._clock()).date()
        return [attendance_view(r, today=today) for r in self._attendance.get_recent_for_employee(int(employee_id), limit)]

    def _apply(
        self,
        employee: Employee,
        record: AttendanceRecord,
        event: EventType,
        at: datetime,
        *,
        now: datetime,
    ) -> AttendanceRecord:
        ts = apply_event(record.timestamps, event, at)
        if ts == record.timestamps:
            return record

        roster = self._resolve_for_record(record, department_id=employee.department_id)
        if roster is None:
            logger.warning(
                "Recording %s for employee %s on %s without a roster", event.value, employee.employee_id, record.work_date
            )

        updated = record.with_timestamps(ts).copy(status=derive_status(ts))
        if updated.roster_id is None and roster is not None:
            updated = updated.copy(roster_id=roster.roster_id)

        attendance_id = self._attendance.upsert_attendance(updated)
        updated = updated.copy(attendance_id=attendance_id)
        return self._refresh_metrics(updated, roster, now=now)

    def _refresh_metrics(
        self,
        record: AttendanceRecord,
        roster: Optional[ResolvedRoster],
        *,
        now: datetime,
    ) -> AttendanceRecord:
        updated = derive_fields(record, roster, now=now)
        if updated != record:
            self._attendance.upsert_attendance(updated)
        return updated

    def _resolve_for_record(self, record: AttendanceRecord, *, department_id: Optional[int]) -> Optional[ResolvedRoster]:
        if record.roster_id is not None:
            roster = self._resolver.resolve_by_id(record.roster_id, record.work_date, department_id=department_id)
            if roster is not None:
                return roster
        return self._resolver.resolve(record.employee_id, record.work_date, department_id=department_id)

    def _require_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise ReferentialIntegrityError(f"Employee {employee_id} does not exist")
        if not employee.is_active:
            raise ValidationError("Employee is inactive")
        return employee

    def _load_or_new(self, employee_id: int, work_date: date) -> AttendanceRecord:
        existing = self._attendance.get_for_employee_and_date(employee_id, work_date)
        return existing or AttendanceRecord(attendance_id=None, employee_id=employee_id, work_date=work_date)
