from __future__ import annotations

from flask import Flask, jsonify, request

from ..admins.guard import make_admin_required
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    admin_required = make_admin_required(container.auth_service)
    service = container.hackathon_service

    @app.route("/api/hackathon/create", methods=["POST"], endpoint="hackathon_create")
    @admin_required
    def hackathon_create():
        return jsonify(service.create(json_body()).to_dict()), 201

    @app.route("/api/hackathon", methods=["GET"], endpoint="hackathon_list")
    def hackathon_list():
        page = service.list_hackathons(
            search=request.args.get("search"),
            page=request.args.get("page"),
            page_size=request.args.get("limit"),
        )
        return jsonify(page.to_dict(lambda h: h.to_dict()))

    @app.route("/api/hackathon/status/<status>", methods=["GET"], endpoint="hackathon_by_status")
    def hackathon_by_status(status: str):
        rows = service.list_by_status(status, limit=request.args.get("limit"), offset=request.args.get("offset"))
        return jsonify([h.to_dict() for h in rows])

    @app.route("/api/hackathon/<int:hackathon_id>", methods=["GET"], endpoint="hackathon_get")
    def hackathon_get(hackathon_id: int):
        return jsonify(service.get(hackathon_id).to_dict())

    @app.route("/api/hackathon/<int:hackathon_id>", methods=["PUT"], endpoint="hackathon_update")
    @admin_required
    def hackathon_update(hackathon_id: int):
        updated = service.update(hackathon_id, json_body())
        return jsonify({"message": "Hackathon updated", "data": updated.to_dict()})

    @app.route("/api/hackathon/<int:hackathon_id>", methods=["DELETE"], endpoint="hackathon_delete")
    @admin_required
    def hackathon_delete(hackathon_id: int):
        service.delete(hackathon_id)
        return jsonify({"message": "Hackathon marked as deleted successfully"})
