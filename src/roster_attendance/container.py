from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.recalculation import AttendanceRecalculator
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import Clock, now_local
from .core.constants import DEFAULT_GRACE_MINUTES
from .core.enums import RosterTieBreak
from .database.connection import DatabaseConnection, DBConfig
from .employees.mysql_employee_repository import MySQLDepartmentRepository, MySQLEmployeeRepository
from .employees.repository import DepartmentRepository, EmployeeRepository
from .reports.service import AttendanceReportService
from .rosters.mysql_override_repository import MySQLScheduleOverrideRepository
from .rosters.mysql_roster_repository import MySQLRosterRepository
from .rosters.repository import RosterRepository, ScheduleOverrideRepository
from .rosters.resolver import RosterResolver
from .rosters.service import RosterService


@dataclass(frozen=True)
class Container:
    conn: Any

    employees_repo: EmployeeRepository
    departments_repo: DepartmentRepository
    rosters_repo: RosterRepository
    overrides_repo: ScheduleOverrideRepository
    attendance_repo: AttendanceRepository

    resolver: RosterResolver
    roster_service: RosterService
    attendance_service: AttendanceService
    recalculator: AttendanceRecalculator
    report_service: AttendanceReportService

    clock: Clock = now_local


def wire(
    *,
    conn: Any,
    employees_repo: EmployeeRepository,
    departments_repo: DepartmentRepository,
    rosters_repo: RosterRepository,
    overrides_repo: ScheduleOverrideRepository,
    attendance_repo: AttendanceRepository,
    tie_break: RosterTieBreak = RosterTieBreak.LATEST_CREATED,
    default_grace_minutes: int = DEFAULT_GRACE_MINUTES,
    clock: Clock = now_local,
) -> Container:
    """Assemble services on top of any repository implementations."""

    resolver = RosterResolver(
        rosters_repo,
        overrides_repo,
        tie_break=tie_break,
        default_grace_minutes=default_grace_minutes,
    )
    attendance_service = AttendanceService(attendance_repo, employees_repo, resolver, clock=clock)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        departments_repo=departments_repo,
        rosters_repo=rosters_repo,
        overrides_repo=overrides_repo,
        attendance_repo=attendance_repo,
        resolver=resolver,
        roster_service=RosterService(rosters_repo, overrides_repo, employees_repo, clock=clock),
        attendance_service=attendance_service,
        recalculator=AttendanceRecalculator(attendance_repo, attendance_service),
        report_service=AttendanceReportService(attendance_repo, clock=clock),
        clock=clock,
    )


def build_container(
    *,
    db_config: dict,
    tie_break: str = RosterTieBreak.LATEST_CREATED.value,
    default_grace_minutes: int = DEFAULT_GRACE_MINUTES,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        conn=conn,
        employees_repo=MySQLEmployeeRepository(conn),
        departments_repo=MySQLDepartmentRepository(conn),
        rosters_repo=MySQLRosterRepository(conn),
        overrides_repo=MySQLScheduleOverrideRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        tie_break=RosterTieBreak(tie_break),
        default_grace_minutes=int(default_grace_minutes),
    )
