"""Create the bootstrap admin account (DEFAULT_ADMIN_USERNAME / DEFAULT_ADMIN_PASSWORD)."""
from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from config import get_settings_module

from hackathon_admin.database.bootstrap import ensure_default_admin
from hackathon_admin.main import configure_logging

logger = logging.getLogger("seed_db")


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(str(getattr(settings, "LOG_LEVEL", "INFO")).upper())
    db_config = dict(settings.DB_CONFIG)

    created = ensure_default_admin(
        db_config,
        username=settings.DEFAULT_ADMIN_USERNAME,
        password=settings.DEFAULT_ADMIN_PASSWORD,
    )
    if not created:
        logger.info("Admin %r already present in %s", settings.DEFAULT_ADMIN_USERNAME, db_config.get("database"))


if __name__ == "__main__":
    main()
