from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request

from ..common.http import error_response, optional_date, optional_int_arg
from ..core.constants import DEFAULT_REPORT_DAYS
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/attendance", methods=["GET"], endpoint="api_report_attendance")
    def api_report_attendance():
        today = container.clock().date()
        try:
            end = optional_date(request.args.get("end"), "end") or today
            start = optional_date(request.args.get("start"), "start") or end - timedelta(days=DEFAULT_REPORT_DAYS - 1)
            report = container.report_service.build_attendance_report(
                start=start,
                end=end,
                employee_id=optional_int_arg(request.args.get("employee_id"), "employee_id"),
                department_id=optional_int_arg(request.args.get("department_id"), "department_id"),
            )
        except DomainError as e:
            return error_response(e)

        return jsonify(
            {
                "start": start.strftime("%Y-%m-%d"),
                "end": end.strftime("%Y-%m-%d"),
                "rows": report.rows,
                "summary": report.summary,
                "stats": report.stats,
            }
        )
