from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus, EventKind
from ..geo.model import GeoPoint


@dataclass(frozen=True)
class AttendanceEvent:
    """One check-in or check-out.

    Immutable once created; the ledger only ever appends these.
    """

    event_id: str
    employee_id: str
    kind: EventKind
    timestamp: datetime
    photo_ref: str
    position: GeoPoint
    status: AttendanceStatus
    department_id: Optional[str] = None
    employee_name: str = ""
    distance_m: Optional[float] = None
    note: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.event_id,
            "employeeId": self.employee_id,
            "name": self.employee_name,
            "type": self.kind.value,
            "timestamp": self.timestamp.isoformat(),
            "photo": self.photo_ref,
            "location": self.position.to_dict(),
            "status": self.status.value,
            "departmentId": self.department_id,
            "distanceM": self.distance_m,
            "note": self.note,
        }


@dataclass(frozen=True)
class PresenceOverview:
    """Read-model for the admin overview (counts derived from the ledger)."""

    day: str
    checked_in: int
    by_status: dict
    absent_employee_ids: tuple
