from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.field_attendance.field_attendance.database.bootstrap import apply_schema, list_tables
from src.field_attendance.field_attendance.main import container_from

logger = logging.getLogger("init_db")


def main() -> None:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    tables = list_tables(db_config)
    logger.info(
        "applied schema.sql -> %s@%s:%s/%s (tables=%d)",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        len(tables),
    )

    password = getattr(settings, "ADMIN_PASSWORD", None)
    if not password:
        logger.warning("ADMIN_PASSWORD not set; no administrator created")
        return

    admin = container_from(settings).roster_service.ensure_admin(
        employee_id=settings.ADMIN_ID,
        name=settings.ADMIN_NAME,
        password=password,
    )
    logger.info("administrator: %s", admin.employee_id)


if __name__ == "__main__":
    main()
