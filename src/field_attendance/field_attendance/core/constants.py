"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000.0

DEFAULT_SITE_RADIUS_METERS = 100.0
DEFAULT_LATE_GRACE_MINUTES = 5

REPORT_RETENTION_DAYS = 30

UNASSIGNED_DEPARTMENT_ID = "UNASSIGNED"
ALL_DEPARTMENTS = "all"

DEFAULT_SUMMARY_EVENT_LIMIT = 50
DEFAULT_HISTORY_LIMIT = 30
