from __future__ import annotations

from flask import Flask, session

from ..common.http import (
    api_view,
    current_user_id,
    json_body,
    json_ok,
    login_required,
    owner_required,
    start_session,
)
from ..common.validators import parse_bool
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/v1/auth/sign-up", methods=["POST"], endpoint="api_sign_up")
    @api_view
    def api_sign_up():
        data = json_body()
        user_id = container.auth_service.sign_up(
            username=data.get("username", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            confirm_password=data.get("confirmPassword", data.get("confirm_password", "")),
            role=data.get("role", ""),
        )
        return json_ok({"message": "User stored successfully", "userId": user_id}, 201)

    @app.route("/api/v1/auth/login", methods=["POST"], endpoint="api_login")
    @api_view
    def api_login():
        data = json_body()
        s_user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        start_session(s_user, remember=bool(data.get("remember")), lifetime_days=app.config["SESSION_DAYS"])
        return json_ok({"user": {"user_id": s_user.user_id, "username": s_user.username, "role": s_user.role.value}})

    @app.route("/api/v1/auth/logout", methods=["POST"], endpoint="api_logout")
    def api_logout():
        session.clear()
        return json_ok({"message": "Logged out"})

    @app.route("/api/v1/auth/me", methods=["GET"], endpoint="api_me")
    @login_required
    @api_view
    def api_me():
        return json_ok({"user": container.user_service.get_user(current_user_id())})

    @app.route("/api/v1/users", methods=["GET"], endpoint="api_users")
    @owner_required
    @api_view
    def api_users():
        return json_ok({"users": container.user_service.list_users()})

    @app.route("/api/v1/users/<int:user_id>", methods=["PATCH"], endpoint="api_user_update")
    @owner_required
    @api_view
    def api_user_update(user_id: int):
        data = json_body()
        if "is_active" not in data:
            raise ValidationError("is_active is required")
        container.user_service.set_active(user_id, is_active=parse_bool(data["is_active"], "is_active"))
        return json_ok({"message": "User updated"})

    @app.route("/api/v1/users/<int:user_id>", methods=["DELETE"], endpoint="api_user_delete")
    @owner_required
    @api_view
    def api_user_delete(user_id: int):
        container.user_service.delete_user(current_user_id=current_user_id(), user_id=user_id)
        return json_ok({"message": "User deleted"})
