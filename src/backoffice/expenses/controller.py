from __future__ import annotations

from flask import Flask, request

from ..common.http import api_view, json_body, json_ok, login_required, owner_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/v1/expenses", methods=["POST"], endpoint="api_expenses_submit")
    @login_required
    @api_view
    def api_expenses_submit():
        data = json_body()
        summary = container.expense_service.submit_summary(
            summary_date=data.get("date"),
            cashiers=data.get("cashiers", data.get("cashers")),
            drinks=data.get("drinks"),
        )
        return json_ok({"message": "Daily summary saved", "summary": summary.to_dict()}, 201)

    @app.route("/api/v1/expenses", methods=["GET"], endpoint="api_expenses_list")
    @owner_required
    @api_view
    def api_expenses_list():
        summaries = container.expense_service.list_summaries(
            start=request.args.get("start"), end=request.args.get("end")
        )
        return json_ok({"summaries": [s.to_dict() for s in summaries]})

    @app.route("/api/v1/expenses/dates", methods=["GET"], endpoint="api_expenses_dates")
    @login_required
    @api_view
    def api_expenses_dates():
        return json_ok({"dates": container.expense_service.submitted_dates()})

    @app.route("/api/v1/expenses/<day>", methods=["GET"], endpoint="api_expenses_get")
    @login_required
    @api_view
    def api_expenses_get(day: str):
        return json_ok({"summary": container.expense_service.get_summary(day).to_dict()})

    @app.route("/api/v1/expenses/<day>/exists", methods=["GET"], endpoint="api_expenses_exists")
    @login_required
    @api_view
    def api_expenses_exists(day: str):
        return json_ok({"exists": container.expense_service.summary_exists(day)})

    @app.route("/api/v1/expenses/<day>/carry-loss", methods=["GET"], endpoint="api_expenses_carry_loss")
    @login_required
    @api_view
    def api_expenses_carry_loss(day: str):
        return json_ok({"date": day, "carry_loss": container.expense_service.carry_loss_for(day)})
