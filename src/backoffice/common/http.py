from __future__ import annotations

import logging
from datetime import timedelta
from functools import wraps
from typing import Any

from flask import current_app, jsonify, redirect, render_template, request, session, url_for

from ..core.enums import Role
from ..core.exceptions import DomainError, ValidationError

logger = logging.getLogger(__name__)


def json_ok(payload: dict | None = None, status: int = 200):
    body = {"success": True}
    body.update(payload or {})
    return jsonify(body), status


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Invalid payload")
    return data


def api_view(view):
    """Translate domain errors into JSON responses; log everything else as a 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return json_error(str(e), e.status_code)
        except Exception:
            logger.exception("Unhandled error in %s %s", request.method, request.path)
            return json_error("Server error", 500)

    return wrapper


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return json_error("Authentication required", 401)
        return view(*args, **kwargs)

    return wrapper


def owner_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return json_error("Authentication required", 401)
        if session.get("role") != Role.OWNER.value:
            return json_error("Owner access required", 403)
        return view(*args, **kwargs)

    return wrapper


def page_login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return redirect(url_for("login"))
        return view(*args, **kwargs)

    return wrapper


def page_owner_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return redirect(url_for("login"))
        if session.get("role") != Role.OWNER.value:
            current_user = {"username": session.get("username"), "role": session.get("role")}
            return render_template("403.html", current_user=current_user), 403
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def start_session(s_user, *, remember: bool, lifetime_days: int) -> None:
    """Store the signed-in user in the Flask session."""
    session.clear()
    session.permanent = bool(remember)
    current_app.permanent_session_lifetime = timedelta(days=int(lifetime_days))
    session["user_id"] = s_user.user_id
    session["username"] = s_user.username
    session["role"] = s_user.role.value
