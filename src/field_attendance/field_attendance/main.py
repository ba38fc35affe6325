from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.enums import GeofencePolicy
from .database.bootstrap import apply_schema, list_tables
from .geo.model import GeoPoint, Site
from .insights.summary import load_summary_client
from .messaging.controller import register as register_messaging
from .reports.controller import register as register_reports
from .roster.controller import register as register_roster

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def company_site_from(settings) -> Optional[Site]:
    lat = getattr(settings, "SITE_LAT", None)
    lng = getattr(settings, "SITE_LNG", None)
    if lat is None or lng is None:
        return None
    return Site(
        location=GeoPoint.parse(lat, lng),
        radius_m=float(getattr(settings, "SITE_RADIUS_M", 100)),
        label=getattr(settings, "SITE_LABEL", ""),
    )


def container_from(settings) -> Container:
    return build_container(
        storage=getattr(settings, "STORAGE", "mysql"),
        db_config=getattr(settings, "DB_CONFIG", None),
        company_site=company_site_from(settings),
        default_radius_m=float(getattr(settings, "SITE_RADIUS_M", 100)),
        geofence_policy=GeofencePolicy(getattr(settings, "GEOFENCE_POLICY", GeofencePolicy.UNRESTRICTED.value)),
        grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", 5)),
        retention_days=int(getattr(settings, "REPORT_RETENTION_DAYS", 30)),
        summary_client=load_summary_client(getattr(settings, "SUMMARY_CLIENT", None)),
    )


def create_app(*, settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        storage = getattr(settings, "STORAGE", "mysql")
        if storage == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
            db_config = settings.DB_CONFIG
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        container = container_from(settings)

    logger.info("settings=%s storage=%s", settings_module, type(container.roster_repo).__name__)

    register_roster(app, container)
    register_attendance(app, container)
    register_messaging(app, container)
    register_reports(app, container)

    app.extensions["field_attendance"] = container
    return app
