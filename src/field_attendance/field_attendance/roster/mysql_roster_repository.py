from __future__ import annotations

from ..core.enums import Role
from ..core.exceptions import ConcurrentModificationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import column_point, column_shift, db_cursor, fetchall, fetchone, optional_float
from .model import Department, Employee, RosterSnapshot
from .repository import RosterRepository

ROSTER_COLLECTION = "roster"


def _row_to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=r["employee_id"],
        name=r["name"],
        phone=r.get("phone") or "",
        department_id=r["department_id"],
        role=Role(r["role"]),
        base_role=Role(r["base_role"]) if r.get("base_role") else None,
        is_shift_required=bool(r.get("is_shift_required")),
        shift=column_shift(r),
        workplace=r.get("workplace") or "",
        workplace_location=column_point(r, "workplace_lat", "workplace_lng"),
        workplace_radius_m=optional_float(r.get("workplace_radius_m")),
        credential=r.get("credential"),
    )


def _row_to_department(r: dict) -> Department:
    return Department(
        department_id=r["department_id"],
        name=r["name"],
        name_en=r.get("name_en") or "",
        color=r.get("color") or "",
        head_id=r.get("head_id"),
    )


class MySQLRosterRepository(RosterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load_roster(self) -> RosterSnapshot:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT version FROM collection_versions WHERE name=%s", (ROSTER_COLLECTION,))
            row = fetchone(cur)
            version = int(row["version"]) if row else 0

            cur.execute(
                """
                SELECT employee_id, name, phone, department_id, role, base_role, is_shift_required,
                       shift_start, shift_end, workplace, workplace_lat, workplace_lng,
                       workplace_radius_m, credential
                FROM employees
                ORDER BY name ASC
                """
            )
            employees = tuple(_row_to_employee(r) for r in fetchall(cur))

            cur.execute("SELECT department_id, name, name_en, color, head_id FROM departments ORDER BY name ASC")
            departments = tuple(_row_to_department(r) for r in fetchall(cur))

        return RosterSnapshot(employees=employees, departments=departments, version=version)

    def save_roster(self, snapshot: RosterSnapshot, *, expected_version: int) -> RosterSnapshot:
        """Replace both tables in one transaction guarded by the roster version."""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT version FROM collection_versions WHERE name=%s FOR UPDATE",
                (ROSTER_COLLECTION,),
            )
            row = fetchone(cur)
            current = int(row["version"]) if row else 0
            if current != expected_version:
                raise ConcurrentModificationError(f"Roster changed (version {current}, expected {expected_version})")

            cur.execute("DELETE FROM employees")
            cur.execute("DELETE FROM departments")

            if snapshot.departments:
                cur.executemany(
                    """
                    INSERT INTO departments(department_id, name, name_en, color, head_id)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    [(d.department_id, d.name, d.name_en, d.color, d.head_id) for d in snapshot.departments],
                )
            if snapshot.employees:
                cur.executemany(
                    """
                    INSERT INTO employees(employee_id, name, phone, department_id, role, base_role, is_shift_required,
                                          shift_start, shift_end, workplace, workplace_lat, workplace_lng,
                                          workplace_radius_m, credential)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    [
                        (
                            e.employee_id,
                            e.name,
                            e.phone,
                            e.department_id,
                            e.role.value,
                            e.base_role.value if e.base_role else None,
                            int(e.is_shift_required),
                            e.shift.start_time if e.shift else None,
                            e.shift.end_time if e.shift else None,
                            e.workplace,
                            e.workplace_location.lat if e.workplace_location else None,
                            e.workplace_location.lng if e.workplace_location else None,
                            e.workplace_radius_m,
                            e.credential,
                        )
                        for e in snapshot.employees
                    ],
                )

            new_version = expected_version + 1
            cur.execute(
                """
                INSERT INTO collection_versions(name, version) VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE version=VALUES(version)
                """,
                (ROSTER_COLLECTION, new_version),
            )

        return RosterSnapshot(employees=snapshot.employees, departments=snapshot.departments, version=new_version)
