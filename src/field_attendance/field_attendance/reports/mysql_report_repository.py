from __future__ import annotations

from typing import Sequence

from ..core.enums import ReportKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Report
from .repository import ReportRepository


class MySQLReportRepository(ReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load_reports(self) -> Sequence[Report]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT report_id, employee_id, employee_name, department_id, content, kind, attachment_ref, ts
                FROM reports
                ORDER BY ts DESC
                """
            )
            return [
                Report(
                    report_id=r["report_id"],
                    employee_id=r["employee_id"],
                    employee_name=r.get("employee_name") or "",
                    department_id=r.get("department_id"),
                    content=r["content"],
                    kind=ReportKind(r["kind"]),
                    attachment_ref=r.get("attachment_ref"),
                    timestamp=r["ts"],
                )
                for r in fetchall(cur)
            ]

    def append_report(self, report: Report) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO reports(report_id, employee_id, employee_name, department_id, content, kind,
                                    attachment_ref, ts)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    report.report_id,
                    report.employee_id,
                    report.employee_name,
                    report.department_id,
                    report.content,
                    report.kind.value,
                    report.attachment_ref,
                    report.timestamp,
                ),
            )
