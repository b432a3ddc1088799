"""Create the database (if missing) and apply database/schema.sql."""
from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv

from config import get_settings_module

from hackathon_admin.database.bootstrap import apply_schema, list_tables
from hackathon_admin.main import configure_logging

logger = logging.getLogger("init_db")

SCHEMA_PATH = Path(__file__).resolve().parents[1] / "database" / "schema.sql"


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(str(getattr(settings, "LOG_LEVEL", "INFO")).upper())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=SCHEMA_PATH)
    tables = list_tables(db_config)
    logger.info(
        "Applied %s to %s@%s/%s: %s",
        SCHEMA_PATH.name,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("database"),
        ", ".join(tables) or "(no tables)",
    )


if __name__ == "__main__":
    main()
