from __future__ import annotations

from datetime import timedelta
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, EventKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import column_point, db_cursor, fetchall, optional_float
from ..shifts.model import ShiftWindow
from .ledger import AttendanceLedger, shift_occurrence_key
from .model import AttendanceEvent
from .repository import AttendanceEventRepository

_EVENT_COLUMNS = """
    event_id, employee_id, employee_name, kind, ts, photo_ref, lat, lng,
    status, department_id, distance_m, note
"""


def _row_to_event(r: dict) -> AttendanceEvent:
    return AttendanceEvent(
        event_id=r["event_id"],
        employee_id=r["employee_id"],
        employee_name=r.get("employee_name") or "",
        kind=EventKind(r["kind"]),
        timestamp=r["ts"],
        photo_ref=r["photo_ref"],
        position=column_point(r, "lat", "lng"),
        status=AttendanceStatus(r["status"]),
        department_id=r.get("department_id"),
        distance_m=optional_float(r.get("distance_m")),
        note=r.get("note"),
    )


class MySQLAttendanceRepository(AttendanceEventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load_events(self) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EVENT_COLUMNS} FROM attendance_events ORDER BY ts ASC")
            return [_row_to_event(r) for r in fetchall(cur)]

    def append_event(self, event: AttendanceEvent, shift: Optional[ShiftWindow] = None) -> None:
        """Duplicate check and insert in one transaction.

        The employee row is locked first so captures for one employee are
        serialized; an occurrence never spans more than two calendar days.
        """
        occurrence = shift_occurrence_key(event.timestamp, shift)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT employee_id FROM employees WHERE employee_id=%s FOR UPDATE", (event.employee_id,))
            fetchall(cur)

            cur.execute(
                f"""
                SELECT {_EVENT_COLUMNS}
                FROM attendance_events
                WHERE employee_id=%s AND kind=%s AND ts >= %s AND ts < %s
                """,
                (
                    event.employee_id,
                    event.kind.value,
                    occurrence - timedelta(days=1),
                    occurrence + timedelta(days=2),
                ),
            )
            AttendanceLedger(_row_to_event(r) for r in fetchall(cur)).record(event, shift=shift)

            cur.execute(
                f"INSERT INTO attendance_events({_EVENT_COLUMNS}) VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)",
                (
                    event.event_id,
                    event.employee_id,
                    event.employee_name,
                    event.kind.value,
                    event.timestamp,
                    event.photo_ref,
                    event.position.lat,
                    event.position.lng,
                    event.status.value,
                    event.department_id,
                    event.distance_m,
                    event.note,
                ),
            )
