from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import error_response, optional_datetime, optional_int_arg, require_date
from ..core.enums import CheckAction
from ..core.exceptions import DomainError, ReferentialIntegrityError, ValidationError
from ..container import Container
from .service import CorrectionRequest, attendance_view


def register(app: Flask, container: Container) -> None:
    def _record_action(action: CheckAction):
        payload = request.get_json(silent=True) or {}
        try:
            employee_id = optional_int_arg(payload.get("employee_id"), "employee_id")
            if employee_id is None:
                raise ValidationError("employee_id is required")
            at = optional_datetime(payload.get("at"), "at")
            record = container.attendance_service.record_action(employee_id, action, at=at)
        except DomainError as e:
            return error_response(e)

        now = container.clock()
        return jsonify(attendance_view(record, today=now.date()))

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="api_check_in")
    def api_check_in():
        return _record_action(CheckAction.CHECK_IN)

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="api_check_out")
    def api_check_out():
        return _record_action(CheckAction.CHECK_OUT)

    @app.route("/api/attendance/<int:employee_id>/<work_date>", methods=["GET"], endpoint="api_attendance_day")
    def api_attendance_day(employee_id: int, work_date: str):
        try:
            if not container.employees_repo.get_by_id(employee_id):
                raise ReferentialIntegrityError(f"Employee {employee_id} does not exist")
            day = container.attendance_service.get_day(employee_id, require_date(work_date, "date"))
        except DomainError as e:
            return error_response(e)
        if day is None:
            return jsonify({"employee_id": employee_id, "work_date": work_date, "status": "ABSENT"})
        return jsonify(day)

    @app.route("/api/attendance/<int:attendance_id>/correct", methods=["POST"], endpoint="api_attendance_correct")
    def api_attendance_correct(attendance_id: int):
        payload = request.get_json(silent=True) or {}
        try:
            correction = CorrectionRequest(
                first_check_in=optional_datetime(payload.get("first_check_in"), "first_check_in"),
                first_check_out=optional_datetime(payload.get("first_check_out"), "first_check_out"),
                second_check_in=optional_datetime(payload.get("second_check_in"), "second_check_in"),
                second_check_out=optional_datetime(payload.get("second_check_out"), "second_check_out"),
                note=payload.get("note"),
            )
            record = container.attendance_service.correct_record(attendance_id, correction)
        except DomainError as e:
            return error_response(e)
        return jsonify(attendance_view(record, today=container.clock().date()))

    @app.route("/api/attendance/recalculate", methods=["POST"], endpoint="api_attendance_recalculate")
    def api_attendance_recalculate():
        payload = request.get_json(silent=True) or {}
        try:
            start = require_date(payload.get("start"), "start")
            end = require_date(payload.get("end"), "end")
            if end < start:
                raise ValidationError("End date must not be before start date")
            summary = container.recalculator.run(
                start=start,
                end=end,
                employee_id=optional_int_arg(payload.get("employee_id"), "employee_id"),
                department_id=optional_int_arg(payload.get("department_id"), "department_id"),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify(summary.to_dict())
