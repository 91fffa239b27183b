from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, optional_int
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

_COLUMNS = """
    a.attendance_id, a.employee_id, a.work_date,
    a.first_check_in_time, a.first_check_out_time, a.second_check_in_time, a.second_check_out_time,
    a.status, a.minutes_late, a.early_departure_minutes, a.working_duration_minutes,
    a.break_duration_minutes, a.roster_id, a.note
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        first_check_in_time=r.get("first_check_in_time"),
        first_check_out_time=r.get("first_check_out_time"),
        second_check_in_time=r.get("second_check_in_time"),
        second_check_out_time=r.get("second_check_out_time"),
        status=AttendanceStatus(r.get("status") or AttendanceStatus.ABSENT.value),
        minutes_late=int(r.get("minutes_late") or 0),
        early_departure_minutes=optional_int(r.get("early_departure_minutes")),
        working_duration_minutes=int(r.get("working_duration_minutes") or 0),
        break_duration_minutes=int(r.get("break_duration_minutes") or 0),
        roster_id=optional_int(r.get("roster_id")),
        note=r.get("note"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance a WHERE a.employee_id=%s AND a.work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance a WHERE a.attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance a
                WHERE a.employee_id=%s
                ORDER BY a.work_date DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def upsert_attendance(self, record: AttendanceRecord) -> int:
        values = (
            record.first_check_in_time,
            record.first_check_out_time,
            record.second_check_in_time,
            record.second_check_out_time,
            record.status.value,
            int(record.minutes_late),
            record.early_departure_minutes,
            int(record.working_duration_minutes),
            int(record.break_duration_minutes),
            record.roster_id,
            record.note,
        )

        with db_cursor(self._conn_factory) as (_, cur):
            if record.attendance_id is None:
                cur.execute(
                    """
                    INSERT INTO attendance(
                        employee_id, work_date,
                        first_check_in_time, first_check_out_time, second_check_in_time, second_check_out_time,
                        status, minutes_late, early_departure_minutes, working_duration_minutes,
                        break_duration_minutes, roster_id, note
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (int(record.employee_id), record.work_date) + values,
                )
                return int(cur.lastrowid)

            cur.execute(
                """
                UPDATE attendance
                SET first_check_in_time=%s, first_check_out_time=%s,
                    second_check_in_time=%s, second_check_out_time=%s,
                    status=%s, minutes_late=%s, early_departure_minutes=%s,
                    working_duration_minutes=%s, break_duration_minutes=%s,
                    roster_id=%s, note=%s
                WHERE attendance_id=%s
                """,
                values + (int(record.attendance_id),),
            )
            return int(record.attendance_id)

    def find_by_date_range(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
        department_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["a.work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if employee_id is not None:
            clauses.append("e.employee_id=%s")
            params.append(int(employee_id))
        if department_id is not None:
            clauses.append("e.department_id=%s")
            params.append(int(department_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, e.full_name, e.department_id, d.name AS department_name
                FROM attendance a
                JOIN employees e ON e.employee_id = a.employee_id
                LEFT JOIN departments d ON d.department_id = e.department_id
                WHERE {where}
                ORDER BY a.work_date DESC, e.employee_id ASC
                """,
                tuple(params),
            )
            return [
                AttendanceReportRow(
                    record=_to_record(r),
                    full_name=r["full_name"],
                    department_id=optional_int(r.get("department_id")),
                    department_name=r.get("department_name"),
                )
                for r in fetchall(cur)
            ]
