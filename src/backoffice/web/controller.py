from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.datetime_utils import format_iso_date, now_local
from ..common.http import page_login_required, page_owner_required, start_session
from ..container import Container
from ..core.exceptions import AuthenticationError, DomainError

logger = logging.getLogger(__name__)


def _current_user() -> dict:
    return {"username": session.get("username"), "role": session.get("role")}


def register(app: Flask, container: Container) -> None:
    @app.route("/", methods=["GET", "POST"], endpoint="login")
    def login():
        if "user_id" in session:
            return redirect(url_for("dashboard"))

        if request.method == "POST":
            try:
                s_user = container.auth_service.authenticate(
                    request.form.get("email", ""), request.form.get("password", "")
                )
                start_session(
                    s_user,
                    remember=bool(request.form.get("remember_me")),
                    lifetime_days=app.config["SESSION_DAYS"],
                )
                return redirect(url_for("dashboard"))
            except AuthenticationError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Login failed")
                flash("Server error while signing in", "danger")

        return render_template("login.html")

    @app.route("/logout", endpoint="logout")
    def logout():
        session.clear()
        flash("Signed out.", "info")
        return redirect(url_for("login"))

    @app.route("/dashboard", endpoint="dashboard")
    @page_login_required
    def dashboard():
        data = {
            "summary_dates": container.expense_service.submitted_dates()[:14],
            "attendance_dates": container.attendance_service.submitted_dates()[:14],
        }
        return render_template("dashboard.html", current_user=_current_user(), data=data, active_page="dashboard")

    @app.route("/reports", endpoint="reports")
    @page_owner_required
    def reports():
        today = now_local().date()
        start = request.args.get("start") or format_iso_date(today - timedelta(days=6))
        end = request.args.get("end") or format_iso_date(today)
        try:
            summaries = container.expense_service.list_summaries(start=start, end=end)
        except DomainError as e:
            flash(str(e), "danger")
            summaries = []
        return render_template(
            "reports.html",
            current_user=_current_user(),
            start=start,
            end=end,
            summaries=summaries,
            staff=container.staff_service.list_staff(active_only=True),
            active_page="reports",
        )
