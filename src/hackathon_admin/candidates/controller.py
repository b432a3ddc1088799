from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file

from ..admins.guard import make_admin_required
from ..common.http import json_body
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    admin_required = make_admin_required(container.auth_service)
    service = container.candidate_service

    @app.route("/api/candidates", methods=["GET"], endpoint="candidates_list")
    def candidates_list():
        page = service.list_candidates(
            search=request.args.get("search"),
            page=request.args.get("page"),
            page_size=request.args.get("limit"),
        )
        return jsonify(page.to_dict(lambda c: c.to_dict()))

    @app.route("/api/candidates", methods=["POST"], endpoint="candidates_register")
    @admin_required
    def candidates_register():
        candidate = service.register_candidate(json_body())
        return jsonify({"message": "Candidate registered", "candidate": candidate.to_dict()}), 201

    @app.route("/api/candidates/import-excel", methods=["POST"], endpoint="candidates_import")
    @admin_required
    def candidates_import():
        upload = request.files.get("excelFile")
        if upload is None or not upload.filename:
            raise ValidationError("No file uploaded")
        result = service.import_file(
            filename=upload.filename,
            stream=io.BytesIO(upload.read()),
            hackathon_id=request.form.get("hackathonId"),
        )
        return jsonify(result.to_dict())

    @app.route("/api/candidates/clear-all", methods=["DELETE"], endpoint="candidates_clear_all")
    @admin_required
    def candidates_clear_all():
        service.clear_all()
        return jsonify(
            {
                "message": "All data cleared successfully",
                "cleared": {"candidates": True, "attendance": True, "squads": True},
            }
        )

    @app.route("/api/candidates/<int:candidate_id>", methods=["GET"], endpoint="candidates_get")
    def candidates_get(candidate_id: int):
        return jsonify(service.get_candidate(candidate_id).to_dict())

    @app.route("/api/candidates/<int:candidate_id>", methods=["PUT"], endpoint="candidates_update")
    @admin_required
    def candidates_update(candidate_id: int):
        # Form posts (with file fields) and JSON bodies are both accepted.
        data = request.form.to_dict() if request.form else json_body()
        service.update_candidate(candidate_id, data)
        return jsonify({"message": "Candidate updated successfully"})

    @app.route("/api/candidates/<int:candidate_id>", methods=["DELETE"], endpoint="candidates_delete")
    @admin_required
    def candidates_delete(candidate_id: int):
        service.delete_candidate(candidate_id)
        return jsonify({"message": "Candidate deleted successfully"})

    @app.route("/api/candidates/<int:candidate_id>/qr-code", methods=["GET"], endpoint="candidates_qr_code")
    def candidates_qr_code(candidate_id: int):
        return jsonify({"qrCode": service.qr_code_for(candidate_id)})

    @app.route("/api/candidates/<int:candidate_id>/qr-image", methods=["GET"], endpoint="candidates_qr_image")
    def candidates_qr_image(candidate_id: int):
        qr_code = service.qr_code_for(candidate_id)
        return jsonify({"qrCodeImage": service.qr_data_url(candidate_id), "qrCode": qr_code})

    @app.route("/api/candidates/<int:candidate_id>/qr.png", methods=["GET"], endpoint="candidates_qr_png")
    def candidates_qr_png(candidate_id: int):
        png = service.qr_png(candidate_id)
        return send_file(io.BytesIO(png), mimetype="image/png", download_name=f"qr_{candidate_id}.png")

    @app.route("/api/candidates/<int:candidate_id>/generate-qr", methods=["POST"], endpoint="candidates_generate_qr")
    @admin_required
    def candidates_generate_qr(candidate_id: int):
        return jsonify({"message": "QR code generated", "qrCode": service.ensure_qr_code(candidate_id)})
