from __future__ import annotations

from flask import Flask, request

from ..common.http import api_view, json_body, json_ok, owner_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.route("/api/v1/payroll/<int:staff_id>", methods=["GET"], endpoint="api_payroll_preview")
    @owner_required
    @api_view
    def api_payroll_preview(staff_id: int):
        breakdown = service.preview(
            staff_id,
            month=request.args.get("month"),
            year=request.args.get("year"),
            start=request.args.get("start"),
            end=request.args.get("end"),
            advance_until=request.args.get("advance_until", request.args.get("advanceUntil")),
        )
        return json_ok({"payroll": breakdown.to_dict()})

    @app.route("/api/v1/payroll/pay", methods=["POST"], endpoint="api_payroll_pay")
    @owner_required
    @api_view
    def api_payroll_pay():
        data = json_body()
        payment = service.pay_salary(
            staff_id=data.get("staff_id", data.get("staffId")),
            month=data.get("month"),
            year=data.get("year"),
            paid_amount=data.get("paid_amount", data.get("paidAmount")),
            advance_until=data.get("advance_until", data.get("advanceUntil")),
            remark=data.get("remark"),
            start=data.get("start"),
            end=data.get("end"),
        )
        return json_ok({"message": "Salary paid successfully", "payment": payment.to_dict()})

    @app.route("/api/v1/salary/prepare-range", methods=["GET"], endpoint="api_salary_prepare_range")
    @owner_required
    @api_view
    def api_salary_prepare_range():
        rows = service.prepare_range(start=request.args.get("start"), end=request.args.get("end"))
        return json_ok({"staff": rows})

    @app.route("/api/v1/salary/pay", methods=["POST"], endpoint="api_salary_pay")
    @owner_required
    @api_view
    def api_salary_pay():
        data = json_body()
        payment = service.pay_range(
            staff_id=data.get("staff_id", data.get("staff")),
            start=data.get("start", data.get("startDate")),
            end=data.get("end", data.get("endDate")),
            owner_adjust=data.get("owner_adjust", data.get("ownerAdjust")),
            paid_amount=data.get("paid_amount", data.get("paidAmount")),
        )
        return json_ok({"message": "Paid & saved", "payment": payment.to_dict()})

    @app.route("/api/v1/salary/history", methods=["GET"], endpoint="api_salary_history")
    @owner_required
    @api_view
    def api_salary_history():
        rows = service.range_history(start=request.args.get("start"), end=request.args.get("end"))
        return json_ok({"payments": rows})

    @app.route("/api/v1/staff/with-advances", methods=["GET"], endpoint="api_staff_with_advances")
    @owner_required
    @api_view
    def api_staff_with_advances():
        rows = service.staff_with_advances(month=request.args.get("month"), year=request.args.get("year"))
        return json_ok({"staff": rows})

    @app.route("/api/v1/staff/<int:staff_id>/advances", methods=["GET"], endpoint="api_staff_advances")
    @owner_required
    @api_view
    def api_staff_advances(staff_id: int):
        data = service.staff_advances(staff_id, month=request.args.get("month"), year=request.args.get("year"))
        return json_ok(data)

    @app.route("/api/v1/advances/confirmed", methods=["GET"], endpoint="api_confirmed_list")
    @owner_required
    @api_view
    def api_confirmed_list():
        records = service.list_confirmed(month=request.args.get("month"), year=request.args.get("year"))
        return json_ok({"confirmed": [r.to_dict() for r in records]})

    @app.route("/api/v1/advances/confirmed", methods=["POST"], endpoint="api_confirmed_save")
    @owner_required
    @api_view
    def api_confirmed_save():
        data = json_body()
        record = service.confirm_advance(
            staff_id=data.get("staff_id", data.get("staffId")),
            month=data.get("month"),
            year=data.get("year"),
            system_calculated_advance=data.get(
                "system_calculated_advance", data.get("systemCalculatedAdvance")
            ),
            owner_adjustment_delta=data.get("owner_adjustment_delta", data.get("ownerAdjustmentDelta")),
            note=data.get("note"),
        )
        return json_ok({"message": "Advance confirmed", "confirmed": record.to_dict()})
