"""Shop back-office package.

Organised by feature modules (staff, attendance, expenses, payroll, proofs, ...)
with a thin Flask controller layer over service/repository layers.
"""
from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .settings import get_settings_module
from .logging_setup import setup_logging
from .core.constants import DEFAULT_SESSION_DAYS

from .database.bootstrap import apply_schema, ensure_owner_user, list_tables

from .container import Container, build_container
from .analytics.controller import register as register_analytics
from .attendance.controller import register as register_attendance
from .expenses.controller import register as register_expenses
from .ocr.controller import register as register_ocr
from .payroll.controller import register as register_payroll
from .proofs.controller import register as register_proofs
from .staff.controller import register as register_staff
from .users.controller import register as register_users
from .web.controller import register as register_web

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FILE", None))

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SESSION_DAYS"] = int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS))
    app.config["UPLOAD_FOLDER"] = getattr(settings, "UPLOAD_FOLDER")
    max_files = int(getattr(settings, "MAX_UPLOAD_FILES", 20))
    max_bytes = int(getattr(settings, "MAX_UPLOAD_BYTES", 5 * 1024 * 1024))
    # Whole request: every file at its limit plus form overhead.
    app.config["MAX_CONTENT_LENGTH"] = max_files * max_bytes + 1024 * 1024

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_owner_user(
                db_config,
                email=getattr(settings, "OWNER_EMAIL", ""),
                password=getattr(settings, "OWNER_PASSWORD", ""),
            )
        container = build_container(db_config=db_config, settings=settings)

    register_web(app, container)
    register_users(app, container)
    register_staff(app, container)
    register_attendance(app, container)
    register_expenses(app, container)
    register_payroll(app, container)
    register_proofs(app, container)
    register_ocr(app, container)
    register_analytics(app, container)

    return app
