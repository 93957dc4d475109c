from __future__ import annotations

from flask import Flask, request

from ..common.http import api_view, json_body, json_ok, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/v1/attendance", methods=["POST"], endpoint="api_attendance_submit")
    @login_required
    @api_view
    def api_attendance_submit():
        data = json_body()
        result = container.attendance_service.submit_day(work_date=data.get("date"), records=data.get("records"))
        return json_ok({"message": result.message, "saved": result.saved, "skipped": result.skipped})

    @app.route("/api/v1/attendance/monthly", methods=["GET"], endpoint="api_attendance_monthly")
    @login_required
    @api_view
    def api_attendance_monthly():
        rows = container.attendance_service.monthly_attendance(
            month=request.args.get("month"),
            year=request.args.get("year"),
        )
        return json_ok({"staff": rows})

    @app.route("/api/v1/attendance/dates", methods=["GET"], endpoint="api_attendance_dates")
    @login_required
    @api_view
    def api_attendance_dates():
        return json_ok({"dates": container.attendance_service.submitted_dates()})
