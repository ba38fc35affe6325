import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

STORAGE = os.getenv("STORAGE", "mysql")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "field_attendance"),
}

SITE_LAT = float(os.environ["SITE_LAT"]) if os.getenv("SITE_LAT") else None
SITE_LNG = float(os.environ["SITE_LNG"]) if os.getenv("SITE_LNG") else None
SITE_LABEL = os.getenv("SITE_LABEL", "")
SITE_RADIUS_M = float(os.getenv("SITE_RADIUS_M", "100"))

GEOFENCE_POLICY = os.getenv("GEOFENCE_POLICY", "unrestricted")
LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "5"))
REPORT_RETENTION_DAYS = int(os.getenv("REPORT_RETENTION_DAYS", "30"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

ADMIN_ID = os.getenv("ADMIN_ID", "ADMIN")
ADMIN_NAME = os.getenv("ADMIN_NAME", "Administrator")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")

# Optional AI summary client as "package.module:factory"; unset disables /api/attendance/summary.
SUMMARY_CLIENT = os.getenv("SUMMARY_CLIENT") or None
