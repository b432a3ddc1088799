from __future__ import annotations

from flask import Flask, jsonify

from ..admins.guard import make_admin_required
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    admin_required = make_admin_required(container.auth_service)
    service = container.squad_service

    @app.route("/api/squads", methods=["POST"], endpoint="squads_create")
    @admin_required
    def squads_create():
        data = json_body()
        squad = service.create_squad(name=data.get("name"), member_ids=data.get("memberIds"))
        return jsonify({"message": "Squad created", "squad": squad.to_dict()})

    @app.route("/api/squads", methods=["GET"], endpoint="squads_list")
    def squads_list():
        return jsonify([s.to_dict() for s in service.list_squads()])

    # Registered before /<id> so the literal path is never read as an id.
    @app.route("/api/squads/available-candidates", methods=["GET"], endpoint="squads_available_candidates")
    def squads_available_candidates():
        return jsonify([c.to_dict() for c in service.available_candidates()])

    @app.route("/api/squads/<int:squad_id>", methods=["GET"], endpoint="squads_get")
    def squads_get(squad_id: int):
        return jsonify(service.get_squad(squad_id).to_dict())

    @app.route("/api/squads/<int:squad_id>", methods=["PUT"], endpoint="squads_update")
    @admin_required
    def squads_update(squad_id: int):
        data = json_body()
        service.update_squad(squad_id, name=data.get("name"), member_ids=data.get("memberIds"))
        return jsonify({"message": "Squad updated"})

    @app.route("/api/squads/<int:squad_id>", methods=["DELETE"], endpoint="squads_delete")
    @admin_required
    def squads_delete(squad_id: int):
        service.delete_squad(squad_id)
        return jsonify({"message": "Squad deleted"})
