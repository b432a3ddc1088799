from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .admins.controller import register as register_admins
from .attendance.controller import register as register_attendance
from .candidates.controller import register as register_candidates
from .common.http import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_default_admin, list_tables
from .hackathons.controller import register as register_hackathons
from .images.controller import register as register_images
from .reports.controller import register as register_reports
from .squads.controller import register as register_squads

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[2]
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str) -> None:
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root.setLevel(level)


def create_app(*, settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    """Application factory.

    ``container`` lets tests inject in-memory repositories; otherwise one is
    built from the settings module picked by ``APP_ENV``.
    """
    load_dotenv(override=False)
    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)

    configure_logging(str(getattr(settings, "LOG_LEVEL", "INFO")).upper())

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = int(getattr(settings, "MAX_UPLOAD_MB", 16)) * 1024 * 1024
    app.json.sort_keys = False

    db_config = dict(getattr(settings, "DB_CONFIG"))
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_default_admin(
                db_config,
                username=getattr(settings, "DEFAULT_ADMIN_USERNAME"),
                password=getattr(settings, "DEFAULT_ADMIN_PASSWORD"),
            )

        container = build_container(
            db_config=db_config,
            secret_key=app.secret_key,
            event_timezone=getattr(settings, "EVENT_TIMEZONE", "UTC"),
            upload_dir=getattr(settings, "UPLOAD_DIR", REPO_ROOT / "uploads"),
            token_max_age=int(getattr(settings, "ADMIN_TOKEN_MAX_AGE", 24 * 60 * 60)),
        )

    app.extensions["container"] = container

    @app.route("/", endpoint="index")
    def index():
        return jsonify({"message": "Hackathon server running!"})

    register_error_handlers(app)
    register_admins(app, container)
    register_candidates(app, container)
    register_attendance(app, container)
    register_squads(app, container)
    register_reports(app, container)
    register_hackathons(app, container)
    register_images(app, container)

    return app
