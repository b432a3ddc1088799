from __future__ import annotations

from flask import Flask, jsonify, request

from ..admins.guard import make_admin_required
from ..common.datetime_utils import parse_optional_date
from ..common.http import json_body
from ..common.validators import require_int
from ..container import Container
from ..core.exceptions import ValidationError

_ADJUSTABLE = ("status", "check_in_time", "check_out_time")


def register(app: Flask, container: Container) -> None:
    admin_required = make_admin_required(container.auth_service)
    service = container.attendance_service

    def _scan(data: dict, *, accept_qr: bool = True, accept_id: bool = True):
        qr_code = data.get("qrCode") if accept_qr else None
        candidate_id = data.get("candidateId") if accept_id else None
        if qr_code in (None, "") and candidate_id in (None, ""):
            if accept_qr and not accept_id:
                raise ValidationError("QR code is required")
            if accept_id and not accept_qr:
                raise ValidationError("Candidate ID is required")
            raise ValidationError("QR code or candidate ID is required")
        if qr_code not in (None, "") and not isinstance(qr_code, str):
            raise ValidationError("QR code must be a string")

        outcome = service.record_scan(
            qr_code=qr_code if qr_code not in (None, "") else None,
            candidate_id=require_int(candidate_id, "candidateId") if candidate_id not in (None, "") else None,
        )
        return jsonify(outcome.to_dict())

    @app.route("/api/attendance/scan", methods=["POST"], endpoint="attendance_scan")
    def attendance_scan():
        """Scan by QR payload or candidate id: check-in, check-out or no-op."""
        return _scan(json_body())

    @app.route("/api/attendance/scan-qr", methods=["POST"], endpoint="attendance_scan_qr")
    def attendance_scan_qr():
        return _scan(json_body(), accept_id=False)

    @app.route("/api/attendance/scan-qr-scanner", methods=["POST"], endpoint="attendance_scan_scanner")
    def attendance_scan_scanner():
        return _scan(json_body(), accept_qr=False)

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    def attendance_list():
        page = service.list_attendance(
            work_date=parse_optional_date(request.args.get("date")),
            page=request.args.get("page"),
            page_size=request.args.get("limit"),
        )
        return jsonify(page.to_dict(lambda e: e.to_dict()))

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    def attendance_stats():
        stats = service.stats(work_date=parse_optional_date(request.args.get("date")))
        return jsonify(stats.to_dict())

    @app.route("/api/attendance/candidate/<int:candidate_id>", methods=["GET"], endpoint="attendance_for_candidate")
    def attendance_for_candidate(candidate_id: int):
        return jsonify([r.to_dict() for r in service.history_for_candidate(candidate_id)])

    @app.route("/api/attendance/<int:attendance_id>", methods=["PUT"], endpoint="attendance_adjust")
    @admin_required
    def attendance_adjust(attendance_id: int):
        data = json_body()
        # "" leaves a field unchanged; null clears check_out_time only.
        fields = {k: data[k] for k in _ADJUSTABLE if k in data and data[k] != ""}
        if fields.get("status", "") is None:
            fields.pop("status")
        updated = service.manual_adjust(attendance_id, **fields)
        return jsonify({"message": "Attendance updated successfully", "updated": updated.to_dict()})
