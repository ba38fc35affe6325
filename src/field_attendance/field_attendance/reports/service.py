from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import ALL_DEPARTMENTS
from ..core.enums import ReportKind
from ..core.exceptions import UnknownEmployeeError, ValidationError
from ..roster.repository import RosterRepository
from .model import Report
from .repository import ReportRepository
from .retention import ReportRetentionPolicy

logger = logging.getLogger(__name__)


def new_report_id() -> str:
    return uuid.uuid4().hex[:9]


class ReportService:
    def __init__(
        self,
        reports: ReportRepository,
        roster: RosterRepository,
        *,
        policy: Optional[ReportRetentionPolicy] = None,
        id_factory: Callable[[], str] = new_report_id,
    ):
        self._reports = reports
        self._roster = roster
        self._policy = policy or ReportRetentionPolicy()
        self._new_id = id_factory

    def submit(
        self,
        *,
        employee_id: str,
        content: str,
        kind: ReportKind = ReportKind.TEXT,
        attachment_ref: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Report:
        employee = self._roster.load_roster().employee(employee_id)
        if not employee:
            raise UnknownEmployeeError(f"Unknown employee {employee_id}", employee_id=employee_id)

        content = require_non_empty(content, "Report")
        attachment_ref = (attachment_ref or "").strip() or None
        if kind in (ReportKind.LINK, ReportKind.FILE) and not attachment_ref:
            raise ValidationError(f"A {kind.value} report needs an attachment")

        report = Report(
            report_id=self._new_id(),
            employee_id=employee.employee_id,
            employee_name=employee.name,
            department_id=employee.department_id,
            content=content,
            kind=kind,
            attachment_ref=attachment_ref,
            timestamp=now or now_local(),
        )
        self._reports.append_report(report)
        logger.info("report=%s submitted by employee=%s", report.report_id, employee_id)
        return report

    def active(self, *, department_filter: Optional[str] = ALL_DEPARTMENTS, now: Optional[datetime] = None) -> list[Report]:
        return self._policy.active_reports(self._reports.load_reports(), now or now_local(), department_filter)
