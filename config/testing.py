SECRET_KEY = "test-secret"

STORAGE = "memory"

DB_CONFIG = {}

SITE_LAT = None
SITE_LNG = None
SITE_RADIUS_M = 100.0

GEOFENCE_POLICY = "unrestricted"
LATE_GRACE_MINUTES = 5
REPORT_RETENTION_DAYS = 30

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False

SUMMARY_CLIENT = None
