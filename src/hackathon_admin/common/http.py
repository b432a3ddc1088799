from __future__ import annotations

import logging

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError, StorageError, ValidationError

logger = logging.getLogger(__name__)


def json_body() -> dict:
    """Return the JSON object of the current request, or an empty dict."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def bearer_token() -> str | None:
    header = request.headers.get("Authorization", "")
    parts = header.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        return None
    return parts[1].strip()


def register_error_handlers(app: Flask) -> None:
    """Map domain errors to JSON responses; never leak stack traces."""

    @app.errorhandler(StorageError)
    def _storage_error(exc: StorageError):
        logger.error("Storage error on %s %s: %s", request.method, request.path, exc, exc_info=exc)
        return jsonify({"error": "Server error"}), 500

    @app.errorhandler(DomainError)
    def _domain_error(exc: DomainError):
        return jsonify({"error": str(exc)}), exc.status_code

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return jsonify({"error": exc.description or exc.name}), exc.code

    @app.errorhandler(Exception)
    def _unhandled(exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.path)
        return jsonify({"error": "Server error"}), 500
