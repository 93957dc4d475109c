from __future__ import annotations

from flask import Flask, request, send_file

from ..common.http import api_view, json_body, json_ok, login_required, owner_required
from ..container import Container
from .model import UploadedImage


def _read_uploads() -> list[UploadedImage]:
    return [
        UploadedImage(filename=f.filename or "", mimetype=f.mimetype or "", data=f.read())
        for f in request.files.getlist("files")
        if f and f.filename
    ]


def register(app: Flask, container: Container) -> None:
    service = container.proof_service

    @app.route("/api/v1/proofs", methods=["POST"], endpoint="api_proofs_upload")
    @login_required
    @api_view
    def api_proofs_upload():
        submission = service.upload(proof_date=request.form.get("date"), images=_read_uploads())
        return json_ok({"message": "Proofs uploaded", "proof": submission.to_dict()}, 201)

    @app.route("/api/v1/proofs", methods=["GET"], endpoint="api_proofs_list")
    @login_required
    @api_view
    def api_proofs_list():
        proofs = service.list_proofs(start=request.args.get("start"), end=request.args.get("end"))
        return json_ok({"proofs": [p.to_dict() for p in proofs]})

    @app.route("/api/v1/proofs/dates", methods=["GET"], endpoint="api_proofs_dates")
    @login_required
    @api_view
    def api_proofs_dates():
        return json_ok({"dates": service.submitted_dates()})

    @app.route("/api/v1/proofs/<day>/<filename>", methods=["DELETE"], endpoint="api_proofs_delete_single")
    @owner_required
    @api_view
    def api_proofs_delete_single(day: str, filename: str):
        submission = service.delete_single(proof_date=day, filename=filename)
        return json_ok({"message": "Image deleted", "proof": submission.to_dict()})

    @app.route("/api/v1/proofs/<day>", methods=["DELETE"], endpoint="api_proofs_delete_many")
    @owner_required
    @api_view
    def api_proofs_delete_many(day: str):
        submission = service.delete_many(proof_date=day, filenames=json_body().get("filenames"))
        return json_ok({"message": "Images deleted", "proof": submission.to_dict()})

    @app.route("/api/v1/proofs/delete-dates", methods=["POST"], endpoint="api_proofs_delete_dates")
    @owner_required
    @api_view
    def api_proofs_delete_dates():
        result = service.delete_dates(json_body().get("dates"))
        return json_ok({"message": "Proofs deleted", **result})

    @app.route("/proof/<day>/<filename>", methods=["GET"], endpoint="proof_file")
    @login_required
    @api_view
    def proof_file(day: str, filename: str):
        return send_file(service.file_path(day, filename))
