from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ReportKind


@dataclass(frozen=True)
class Report:
    """A field report as submitted. Immutable; expiry only hides it."""

    report_id: str
    employee_id: str
    employee_name: str
    content: str
    kind: ReportKind
    timestamp: datetime
    department_id: Optional[str] = None
    attachment_ref: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.report_id,
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "departmentId": self.department_id,
            "content": self.content,
            "type": self.kind.value,
            "attachmentUrl": self.attachment_ref,
            "timestamp": self.timestamp.isoformat(),
        }
