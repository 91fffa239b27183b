from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import error_response, optional_date, optional_int_arg, require_date
from ..core.exceptions import DomainError, ReferentialIntegrityError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/rosters/resolve", methods=["GET"], endpoint="api_roster_resolve")
    def api_roster_resolve():
        try:
            employee_id = optional_int_arg(request.args.get("employee_id"), "employee_id")
            if employee_id is None:
                raise ValidationError("employee_id is required")
            work_date = require_date(request.args.get("date"), "date")

            employee = container.employees_repo.get_by_id(employee_id)
            if not employee:
                raise ReferentialIntegrityError(f"Employee {employee_id} does not exist")
            resolved = container.resolver.resolve(employee_id, work_date, department_id=employee.department_id)
        except DomainError as e:
            return error_response(e)

        if resolved is None:
            return jsonify({"error": "No active roster for this date"}), 404
        return jsonify(resolved.to_dict())

    @app.route("/api/rosters", methods=["POST"], endpoint="api_roster_create")
    def api_roster_create():
        payload = request.get_json(silent=True) or {}
        try:
            roster_id = container.roster_service.create_roster(
                employee_id=payload.get("employee_id"),
                start_date=require_date(payload.get("start_date"), "start_date"),
                end_date=require_date(payload.get("end_date"), "end_date"),
                start_time=payload.get("start_time"),
                end_time=payload.get("end_time"),
                break_duration=payload.get("break_duration", 0),
                early_departure_threshold=payload.get("early_departure_threshold", 0),
                grace_period=payload.get("grace_period"),
                shift_pattern=payload.get("shift_pattern"),
                name=payload.get("name"),
                supersede=bool(payload.get("supersede", True)),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"roster_id": roster_id}), 201

    @app.route("/api/rosters/<int:roster_id>/hours", methods=["POST"], endpoint="api_roster_update_hours")
    def api_roster_update_hours(roster_id: int):
        payload = request.get_json(silent=True) or {}
        try:
            container.roster_service.update_hours(
                roster_id=roster_id,
                start_time=payload.get("start_time"),
                end_time=payload.get("end_time"),
                break_duration=payload.get("break_duration"),
                early_departure_threshold=payload.get("early_departure_threshold"),
                grace_period=payload.get("grace_period"),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"roster_id": roster_id})

    @app.route("/api/rosters/<int:roster_id>/deactivate", methods=["POST"], endpoint="api_roster_deactivate")
    def api_roster_deactivate(roster_id: int):
        try:
            container.roster_service.deactivate(roster_id=roster_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({"roster_id": roster_id, "is_active": False})

    @app.route("/api/overrides", methods=["POST"], endpoint="api_override_create")
    def api_override_create():
        payload = request.get_json(silent=True) or {}
        try:
            override_id = container.roster_service.add_override(
                scope=payload.get("scope"),
                target_id=payload.get("target_id"),
                start_time=payload.get("start_time"),
                end_time=payload.get("end_time"),
                effective_from=require_date(payload.get("effective_from"), "effective_from"),
                effective_until=optional_date(payload.get("effective_until"), "effective_until"),
                reason=payload.get("reason"),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"override_id": override_id}), 201

    @app.route("/api/overrides/<int:override_id>/deactivate", methods=["POST"], endpoint="api_override_deactivate")
    def api_override_deactivate(override_id: int):
        try:
            container.roster_service.deactivate_override(override_id=override_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({"override_id": override_id, "is_active": False})
