from __future__ import annotations

from flask import Flask, request

from ..common.http import api_view, json_ok, login_required
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/v1/ocr", methods=["POST"], endpoint="api_ocr")
    @login_required
    @api_view
    def api_ocr():
        upload = request.files.get("image")
        if not upload or not upload.filename:
            raise ValidationError("No file uploaded")
        return json_ok({"lines": container.ocr_client.read_lines(upload.read())})
