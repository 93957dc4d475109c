from __future__ import annotations

from flask import Flask, request

from ..common.http import api_view, json_body, json_ok, login_required, owner_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/v1/staff", methods=["GET"], endpoint="api_staff_list")
    @owner_required
    @api_view
    def api_staff_list():
        active_only = request.args.get("active") in {"1", "true", "yes"}
        staff = container.staff_service.list_staff(active_only=active_only)
        return json_ok({"staff": [s.to_dict() for s in staff]})

    @app.route("/api/v1/staff/form", methods=["GET"], endpoint="api_staff_form")
    @login_required
    @api_view
    def api_staff_form():
        return json_ok({"staff": container.staff_service.list_for_form()})

    @app.route("/api/v1/staff", methods=["POST"], endpoint="api_staff_create")
    @owner_required
    @api_view
    def api_staff_create():
        data = json_body()
        staff_id = container.staff_service.create_staff(
            name=data.get("name"),
            designation=data.get("designation"),
            salary=data.get("salary"),
        )
        return json_ok({"message": "Staff saved successfully", "staff_id": staff_id}, 201)

    @app.route("/api/v1/staff/<int:staff_id>", methods=["PUT"], endpoint="api_staff_update")
    @owner_required
    @api_view
    def api_staff_update(staff_id: int):
        data = json_body()
        staff = container.staff_service.update_staff(
            staff_id,
            name=data.get("name"),
            designation=data.get("designation"),
            salary=data.get("salary"),
            active=data.get("active"),
            remaining_advance=data.get("remainingAdvance", data.get("remaining_advance")),
        )
        return json_ok({"message": "Staff updated successfully", "staff": staff.to_dict()})

    @app.route("/api/v1/staff/<int:staff_id>", methods=["DELETE"], endpoint="api_staff_delete")
    @owner_required
    @api_view
    def api_staff_delete(staff_id: int):
        container.staff_service.delete_staff(staff_id)
        return json_ok({"message": "Staff deleted"})
