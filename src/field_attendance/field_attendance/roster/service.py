from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import Callable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import UNASSIGNED_DEPARTMENT_ID
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, UnknownEmployeeError, ValidationError
from ..geo.model import GeoPoint
from ..identity.qr import decode_identity
from ..shifts.model import ShiftWindow
from .engine import RosterConsistencyEngine
from .model import Department, Employee, RosterSnapshot
from .repository import RosterRepository

logger = logging.getLogger(__name__)


def new_employee_id() -> str:
    return uuid.uuid4().hex[:9]


class RosterService:
    """Use case: administer employees and departments.

    Each operation loads one snapshot, applies one engine transition and
    saves the successor with the version it was loaded at.
    """

    def __init__(
        self,
        roster: RosterRepository,
        *,
        engine: Optional[RosterConsistencyEngine] = None,
        id_factory: Callable[[], str] = new_employee_id,
    ):
        self._roster = roster
        self._engine = engine or RosterConsistencyEngine()
        self._new_id = id_factory

    def snapshot(self) -> RosterSnapshot:
        return self._roster.load_roster()

    def _apply(self, transition: Callable[..., RosterSnapshot], *args) -> RosterSnapshot:
        current = self._roster.load_roster()
        successor = transition(current, *args)
        return self._roster.save_roster(successor, expected_version=current.version)

    def assign_head(self, department_id: str, employee_id: Optional[str]) -> RosterSnapshot:
        return self._apply(self._engine.assign_head, department_id, employee_id)

    def remove_employee(self, employee_id: str) -> RosterSnapshot:
        return self._apply(self._engine.remove_employee, employee_id)

    def remove_department(self, department_id: str) -> RosterSnapshot:
        return self._apply(self._engine.remove_department, department_id)

    def add_department(self, *, department_id: str, name: str, name_en: str = "", color: str = "") -> RosterSnapshot:
        department = Department(
            department_id=require_non_empty(department_id, "Department id"),
            name=require_non_empty(name, "Department name"),
            name_en=(name_en or "").strip(),
            color=(color or "").strip(),
        )
        return self._apply(self._engine.add_department, department)

    def update_department(self, department: Department) -> RosterSnapshot:
        return self._apply(self._engine.update_department, department)

    def update_employee(self, employee: Employee) -> RosterSnapshot:
        return self._apply(self._engine.update_employee, employee)

    def sync_roles(self) -> RosterSnapshot:
        return self._apply(self._engine.sync_roles)

    def create_employee(
        self,
        *,
        name: str,
        department_id: str,
        password: str,
        phone: str = "",
        role: Role = Role.WORKER,
        shift: Optional[ShiftWindow] = None,
        is_shift_required: bool = False,
        workplace: str = "",
        workplace_location: Optional[GeoPoint] = None,
    ) -> Employee:
        name = require_non_empty(name, "Name")
        require_min_length(password, "Password", 6)
        if role == Role.DEPT_HEAD:
            raise ValidationError("Department heads are assigned per department")
        if is_shift_required and shift is None:
            raise ValidationError("Shift start and end are required")

        employee = Employee(
            employee_id=self._new_id(),
            name=name,
            department_id=department_id,
            role=role,
            phone=(phone or "").strip(),
            is_shift_required=bool(is_shift_required),
            shift=shift,
            workplace=(workplace or "").strip(),
            workplace_location=workplace_location,
            credential=generate_password_hash(password),
        )
        successor = self._apply(self._engine.add_employee, employee)
        logger.info("employee=%s created in department=%s", employee.employee_id, department_id)
        return successor.employee(employee.employee_id)

    def ensure_admin(self, *, employee_id: str, name: str, password: str) -> Employee:
        """Create the first administrator unless one already exists."""
        roster = self._roster.load_roster()
        existing = next((e for e in roster.employees if e.is_admin), None)
        if existing is not None:
            return existing

        require_min_length(password, "Password", 6)
        admin = Employee(
            employee_id=require_non_empty(employee_id, "Employee id"),
            name=require_non_empty(name, "Name"),
            department_id=UNASSIGNED_DEPARTMENT_ID,
            role=Role.ADMIN,
            credential=generate_password_hash(password),
        )
        self._apply(self._engine.add_employee, admin)
        logger.info("bootstrap administrator %s created", admin.employee_id)
        return admin

    def change_password(self, employee_id: str, password: str) -> None:
        require_min_length(password, "Password", 6)
        employee = self.get(employee_id)
        self.update_employee(replace(employee, credential=generate_password_hash(password)))

    def get(self, employee_id: str) -> Employee:
        employee = self._roster.load_roster().employee(employee_id)
        if employee is None:
            raise UnknownEmployeeError(f"Unknown employee {employee_id}", employee_id=employee_id)
        return employee

    def authenticate(self, login: str, password: str) -> Employee:
        """Log in by employee id or phone number."""
        login = (login or "").strip()
        roster = self._roster.load_roster()
        employee = roster.employee(login) or next(
            (e for e in roster.employees if e.phone and e.phone == login), None
        )
        if not employee or not employee.credential:
            raise AuthenticationError("Wrong login or password")

        try:
            ok = check_password_hash(employee.credential, password)
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Wrong login or password")
        return employee

    def lookup_identity(self, payload: str) -> Employee:
        """Resolve a scanned identity QR payload to the current employee."""
        identity = decode_identity(payload)
        return self.get(identity.employee_id)
