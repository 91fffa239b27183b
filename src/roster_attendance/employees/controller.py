from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_wall_time
from ..common.http import error_response, optional_int_arg
from ..core.exceptions import DomainError, MalformedScheduleError, ReferentialIntegrityError
from ..container import Container
from ..rosters.model import Roster


def _roster_view(roster: Roster) -> dict:
    def _t(value) -> str:
        try:
            return parse_wall_time(value).strftime("%H:%M")
        except MalformedScheduleError:
            return "-"

    return {
        "roster_id": roster.roster_id,
        "name": roster.name or "",
        "start_date": roster.start_date.strftime("%Y-%m-%d"),
        "end_date": roster.end_date.strftime("%Y-%m-%d"),
        "start_time": _t(roster.start_time),
        "end_time": _t(roster.end_time),
        "break_duration": roster.break_duration,
        "grace_period": roster.grace_period,
        "is_active": roster.is_active,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/departments", methods=["GET"], endpoint="api_departments")
    def api_departments():
        departments = container.departments_repo.list_all()
        return jsonify([{"department_id": d.department_id, "name": d.name} for d in departments])

    @app.route("/api/employees", methods=["GET"], endpoint="api_employees")
    def api_employees():
        try:
            department_id = optional_int_arg(request.args.get("department_id"), "department_id")
        except DomainError as e:
            return error_response(e)
        employees = container.employees_repo.list_active(department_id=department_id)
        return jsonify(
            [{"employee_id": e.employee_id, "full_name": e.full_name, "department_id": e.department_id} for e in employees]
        )

    @app.route("/api/employees/<int:employee_id>/rosters", methods=["GET"], endpoint="api_employee_rosters")
    def api_employee_rosters(employee_id: int):
        try:
            rosters = container.roster_service.list_rosters(employee_id=employee_id)
        except DomainError as e:
            return error_response(e)
        return jsonify([_roster_view(r) for r in rosters])

    @app.route("/api/employees/<int:employee_id>/attendance", methods=["GET"], endpoint="api_employee_attendance")
    def api_employee_attendance(employee_id: int):
        try:
            if not container.employees_repo.get_by_id(employee_id):
                raise ReferentialIntegrityError(f"Employee {employee_id} does not exist")
            limit = optional_int_arg(request.args.get("limit"), "limit")
            history = (
                container.attendance_service.get_history(employee_id, limit=limit)
                if limit
                else container.attendance_service.get_history(employee_id)
            )
        except DomainError as e:
            return error_response(e)
        return jsonify(history)
