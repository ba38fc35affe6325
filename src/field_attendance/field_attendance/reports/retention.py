from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, Optional

from ..core.constants import ALL_DEPARTMENTS, REPORT_RETENTION_DAYS
from .model import Report


class ReportRetentionPolicy:
    """Which reports are visible: younger than the retention window and in
    the requested department (``None`` or ``"all"`` means every department).

    Filtering view only. Expired reports stay in the store.
    """

    def __init__(self, retention_days: int = REPORT_RETENTION_DAYS):
        self.retention = timedelta(days=int(retention_days))

    def is_retained(self, report: Report, now: datetime) -> bool:
        return now - report.timestamp <= self.retention

    def active_reports(
        self,
        reports: Iterable[Report],
        now: datetime,
        department_filter: Optional[str] = ALL_DEPARTMENTS,
    ) -> list[Report]:
        wildcard = department_filter is None or department_filter == ALL_DEPARTMENTS
        active = [
            r
            for r in reports
            if self.is_retained(r, now) and (wildcard or r.department_id == department_filter)
        ]
        active.sort(key=lambda r: r.timestamp, reverse=True)
        return active
