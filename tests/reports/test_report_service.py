from datetime import date, datetime

import pytest

from fakes import FixedClock, InMemoryAttendance, InMemoryDepartments, InMemoryEmployees, at

from roster_attendance.attendance.model import AttendanceRecord
from roster_attendance.core.enums import AttendanceStatus
from roster_attendance.core.exceptions import ValidationError
from roster_attendance.employees.model import Department, Employee
from roster_attendance.reports.service import AttendanceReportService

MONDAY = date(2025, 1, 6)
TUESDAY = date(2025, 1, 7)


@pytest.fixture
def attendance():
    employees = InMemoryEmployees(
        Employee(employee_id=1, full_name="Nguyen Van An", department_id=7),
        Employee(employee_id=2, full_name="Tran Thi Binh", department_id=8),
    )
    repo = InMemoryAttendance(employees, InMemoryDepartments(Department(7, "Engineering"), Department(8, "Administration")))
    repo.add(
        AttendanceRecord(
            attendance_id=None,
            employee_id=1,
            work_date=MONDAY,
            first_check_in_time=at(MONDAY, "08:20"),
            first_check_out_time=at(MONDAY, "17:00"),
            status=AttendanceStatus.FIRST_CHECK_OUT,
            minutes_late=20,
            working_duration_minutes=520,
        )
    )
    repo.add(
        AttendanceRecord(
            attendance_id=None,
            employee_id=1,
            work_date=TUESDAY,
            first_check_in_time=at(TUESDAY, "08:00"),
            status=AttendanceStatus.FIRST_SESSION_ACTIVE,
            working_duration_minutes=60,
        )
    )
    repo.add(
        AttendanceRecord(
            attendance_id=None,
            employee_id=2,
            work_date=MONDAY,
            status=AttendanceStatus.COMPLETED,
            working_duration_minutes=480,
        )
    )
    return repo


def test_report_rows_summary_and_stats(attendance):
    svc = AttendanceReportService(attendance, clock=FixedClock(datetime(2025, 1, 7, 9, 0)))

    report = svc.build_attendance_report(start=MONDAY, end=TUESDAY)

    assert len(report.rows) == 3
    monday_row = next(r for r in report.rows if r["employee_id"] == 1 and r["work_date"] == "2025-01-06")
    assert monday_row["status"] == AttendanceStatus.CHECKED_OUT.value
    assert monday_row["late_display"] == "20M"
    assert monday_row["department_name"] == "Engineering"

    top = report.summary[0]
    assert top["employee_id"] == 1
    assert top["days"] == 2
    assert top["late_days"] == 1
    assert top["total_hours"] == "09:40"

    assert report.stats["total"] == 3
    assert report.stats["late_count"] == 1
    assert {d["department_name"] for d in report.stats["per_department"]} == {"Engineering", "Administration"}


def test_report_filters(attendance):
    svc = AttendanceReportService(attendance)

    assert len(svc.build_attendance_report(start=MONDAY, end=MONDAY).rows) == 2
    assert len(svc.build_attendance_report(start=MONDAY, end=TUESDAY, department_id=8).rows) == 1
    assert len(svc.build_attendance_report(start=MONDAY, end=TUESDAY, employee_id=1).rows) == 2


def test_report_rejects_reversed_window(attendance):
    with pytest.raises(ValidationError):
        AttendanceReportService(attendance).build_attendance_report(start=TUESDAY, end=MONDAY)
