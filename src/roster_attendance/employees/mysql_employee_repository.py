from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EmployeeStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, optional_int
from .model import Department, Employee
from .repository import DepartmentRepository, EmployeeRepository


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        full_name=r["full_name"],
        department_id=optional_int(r.get("department_id")),
        status=EmployeeStatus(r.get("status") or EmployeeStatus.ACTIVE.value),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, full_name, department_id, status
                FROM employees
                WHERE employee_id=%s
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_active(self, *, department_id: Optional[int] = None) -> Sequence[Employee]:
        clauses = ["status='active'"]
        params: list[object] = []
        if department_id is not None:
            clauses.append("department_id=%s")
            params.append(int(department_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT employee_id, full_name, department_id, status
                FROM employees
                WHERE {" AND ".join(clauses)}
                ORDER BY employee_id
                """,
                tuple(params),
            )
            return [_to_employee(r) for r in fetchall(cur)]


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, department_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT department_id, name FROM departments WHERE department_id=%s",
                (int(department_id),),
            )
            r = fetchone(cur)
            return Department(department_id=int(r["department_id"]), name=r["name"]) if r else None

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT department_id, name FROM departments ORDER BY name")
            return [Department(department_id=int(r["department_id"]), name=r["name"]) for r in fetchall(cur)]
