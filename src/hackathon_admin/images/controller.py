from __future__ import annotations

from flask import Flask, jsonify, request, send_file

from ..admins.guard import make_admin_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    admin_required = make_admin_required(container.auth_service)
    service = container.image_service

    @app.route("/api/image/upload", methods=["POST"], endpoint="image_upload")
    @admin_required
    def image_upload():
        filename = service.save_photo(request.form.get("candidateId"), request.files.get("image"))
        return jsonify({"message": "Image uploaded", "file": filename})

    @app.route("/api/image/<int:candidate_id>", methods=["GET"], endpoint="image_get")
    def image_get(candidate_id: int):
        return send_file(service.photo_path(candidate_id))
