from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..attendance.service import attendance_view
from ..common.datetime_utils import Clock, format_hhmm, now_local
from ..core.exceptions import ValidationError
from .aggregator import aggregate


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]
    stats: dict


class AttendanceReportService:
    """Per-record rows, per-employee totals and aggregate statistics for a period."""

    def __init__(self, attendance: AttendanceRepository, *, clock: Clock = now_local):
        self._attendance = attendance
        self._clock = clock

    def build_attendance_report(
        self,
        *,
        start: date,
        end: date,
        employee_id: Optional[int] = None,
        department_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> ReportData:
        if end < start:
            raise ValidationError("End date must not be before start date")

        today = (now or self._clock()).date()
        query_rows = self._attendance.find_by_date_range(
            start_date=start, end_date=end, employee_id=employee_id, department_id=department_id
        )

        summary_map: dict[int, dict] = {}
        out_rows: list[dict] = []
        department_names: dict[int, str] = {}

        for r in query_rows:
            row = attendance_view(r.record, today=today)
            row["full_name"] = r.full_name
            row["department_name"] = r.department_name or "-"
            out_rows.append(row)
            if r.department_id is not None and r.department_name:
                department_names[r.department_id] = r.department_name

            s = summary_map.get(r.employee_id)
            if not s:
                s = {
                    "employee_id": r.employee_id,
                    "full_name": r.full_name,
                    "days": 0,
                    "late_days": 0,
                    "total_late_minutes": 0,
                    "total_minutes": 0,
                }
                summary_map[r.employee_id] = s
            s["days"] += 1
            s["late_days"] += 1 if r.record.is_late else 0
            s["total_late_minutes"] += r.record.minutes_late
            s["total_minutes"] += r.record.working_duration_minutes

        summary = []
        for s in summary_map.values():
            s["total_hours"] = format_hhmm(s["total_minutes"])
            summary.append(s)

        summary.sort(key=lambda x: x["total_minutes"], reverse=True)
        stats = aggregate(query_rows).to_dict(department_names)
        return ReportData(rows=out_rows, summary=summary, stats=stats)
