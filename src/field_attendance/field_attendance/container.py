from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.classifier import AttendanceClassifier
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceEventRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_LATE_GRACE_MINUTES, DEFAULT_SITE_RADIUS_METERS, REPORT_RETENTION_DAYS
from .core.enums import GeofencePolicy
from .database.connection import DBConfig, DatabaseConnection
from .geo.model import Site
from .insights.summary import AttendanceSummaryService, SummaryClient
from .messaging.mysql_message_repository import MySQLMessageRepository
from .messaging.repository import MessageRepository
from .messaging.service import MessagingService
from .reports.mysql_report_repository import MySQLReportRepository
from .reports.repository import ReportRepository
from .reports.retention import ReportRetentionPolicy
from .reports.service import ReportService
from .roster.mysql_roster_repository import MySQLRosterRepository
from .roster.repository import RosterRepository
from .roster.service import RosterService
from .store.memory import InMemoryStore


@dataclass(frozen=True)
class Container:
    roster_repo: RosterRepository
    events_repo: AttendanceEventRepository
    reports_repo: ReportRepository
    messages_repo: MessageRepository

    roster_service: RosterService
    attendance_service: AttendanceService
    messaging_service: MessagingService
    report_service: ReportService
    summary_service: AttendanceSummaryService


def build_container(
    *,
    storage: str = "mysql",
    db_config: Optional[dict] = None,
    store: Optional[InMemoryStore] = None,
    company_site: Optional[Site] = None,
    default_radius_m: float = DEFAULT_SITE_RADIUS_METERS,
    geofence_policy: GeofencePolicy = GeofencePolicy.UNRESTRICTED,
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
    retention_days: int = REPORT_RETENTION_DAYS,
    summary_client: Optional[SummaryClient] = None,
) -> Container:
    if storage == "memory":
        store = store or InMemoryStore()
        roster_repo = events_repo = reports_repo = messages_repo = store
    elif storage == "mysql":
        if not db_config:
            raise ValueError("DB_CONFIG is required for mysql storage")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        roster_repo = MySQLRosterRepository(conn)
        events_repo = MySQLAttendanceRepository(conn)
        reports_repo = MySQLReportRepository(conn)
        messages_repo = MySQLMessageRepository(conn)
    else:
        raise ValueError(f"Unknown storage backend: {storage!r}")

    classifier = AttendanceClassifier(policy=GeofencePolicy(geofence_policy), grace_minutes=grace_minutes)

    return Container(
        roster_repo=roster_repo,
        events_repo=events_repo,
        reports_repo=reports_repo,
        messages_repo=messages_repo,
        roster_service=RosterService(roster_repo),
        attendance_service=AttendanceService(
            events_repo,
            roster_repo,
            classifier=classifier,
            company_site=company_site,
            default_radius_m=default_radius_m,
        ),
        messaging_service=MessagingService(messages_repo, roster_repo),
        report_service=ReportService(
            reports_repo,
            roster_repo,
            policy=ReportRetentionPolicy(retention_days=retention_days),
        ),
        summary_service=AttendanceSummaryService(summary_client),
    )
