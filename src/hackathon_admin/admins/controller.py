from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.http import bearer_token, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service

    @app.route("/api/admin/login", methods=["POST"], endpoint="admin_login")
    def admin_login():
        data = json_body()
        return jsonify(auth.login(data.get("username"), data.get("password")).to_dict())

    @app.route("/api/admin/create", methods=["POST"], endpoint="admin_create")
    def admin_create():
        # The very first admin can be created without a token.
        if auth.has_admins():
            g.admin = auth.verify_token(bearer_token())
        data = json_body()
        admin = auth.create_admin(data.get("username"), data.get("password"))
        return jsonify({"message": "Admin created successfully", "admin": admin.to_dict()})
