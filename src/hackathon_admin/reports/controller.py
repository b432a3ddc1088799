from __future__ import annotations

import io

from flask import Flask, jsonify, send_file

from ..admins.guard import make_admin_required
from ..container import Container
from .pdf import PDF_MIMETYPE
from .service import EXCEL_MIMETYPE


def register(app: Flask, container: Container) -> None:
    admin_required = make_admin_required(container.auth_service)
    service = container.report_service

    @app.route("/api/reports/comprehensive", methods=["GET"], endpoint="reports_comprehensive")
    @admin_required
    def reports_comprehensive():
        return jsonify(service.comprehensive())

    @app.route("/api/reports/download-excel", methods=["GET"], endpoint="reports_download_excel")
    @admin_required
    def reports_download_excel():
        return send_file(
            io.BytesIO(service.excel_workbook()),
            mimetype=EXCEL_MIMETYPE,
            as_attachment=True,
            download_name=service.excel_filename(),
        )

    @app.route("/api/hackathon/<int:hackathon_id>/squads/pdf", methods=["GET"], endpoint="reports_squads_pdf")
    @admin_required
    def reports_squads_pdf(hackathon_id: int):
        hackathon = container.hackathon_service.get(hackathon_id)
        pdf = service.squads_pdf(
            hackathon,
            container.squad_service.list_squads(),
            photo_for=container.image_service.photo_file,
        )
        return send_file(
            io.BytesIO(pdf),
            mimetype=PDF_MIMETYPE,
            as_attachment=True,
            download_name=service.squads_pdf_filename(hackathon_id),
        )
