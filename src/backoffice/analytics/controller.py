from __future__ import annotations

from flask import Flask, request

from ..common.http import api_view, json_ok, owner_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/v1/analytics/pie", methods=["GET"], endpoint="api_analytics_pie")
    @owner_required
    @api_view
    def api_analytics_pie():
        data = container.analytics_service.pie(
            start=request.args.get("start"),
            end=request.args.get("end"),
            basis=request.args.get("basis"),
        )
        return json_ok(data)
