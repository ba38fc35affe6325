from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import Role
from ..geo.model import GeoPoint, Site
from ..shifts.model import ShiftWindow


@dataclass(frozen=True)
class Employee:
    """Pure data object; no storage access.

    ``role == DEPT_HEAD`` iff the employee is the head of some department;
    ``RosterConsistencyEngine`` keeps that true. While heading a department
    ``base_role`` remembers the role held before, so an ADMIN or SUPERVISOR
    gets it back when the headship ends.
    """

    employee_id: str
    name: str
    department_id: str
    role: Role = Role.WORKER
    phone: str = ""
    is_shift_required: bool = False
    shift: Optional[ShiftWindow] = None
    workplace: str = ""
    workplace_location: Optional[GeoPoint] = None
    workplace_radius_m: Optional[float] = None
    credential: Optional[str] = field(default=None, repr=False)
    base_role: Optional[Role] = None

    @property
    def standing_role(self) -> Role:
        """The role independent of any headship."""
        if self.base_role is not None:
            return self.base_role
        return Role.WORKER if self.role == Role.DEPT_HEAD else self.role

    @property
    def is_admin(self) -> bool:
        return self.standing_role == Role.ADMIN

    def site(self, default_radius_m: float) -> Optional[Site]:
        if self.workplace_location is None:
            return None
        radius = self.workplace_radius_m if self.workplace_radius_m is not None else default_radius_m
        return Site(location=self.workplace_location, radius_m=float(radius), label=self.workplace)

    def to_dict(self) -> dict:
        return {
            "id": self.employee_id,
            "name": self.name,
            "phone": self.phone,
            "departmentId": self.department_id,
            "userRole": self.role.value,
            "baseRole": self.standing_role.value,
            "isShiftRequired": self.is_shift_required,
            "shiftStart": self.shift.start_time.strftime("%H:%M") if self.shift else None,
            "shiftEnd": self.shift.end_time.strftime("%H:%M") if self.shift else None,
            "workplace": self.workplace,
            "workplaceLocation": self.workplace_location.to_dict() if self.workplace_location else None,
        }


@dataclass(frozen=True)
class Department:
    department_id: str
    name: str
    name_en: str = ""
    color: str = ""
    head_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.department_id,
            "name": self.name,
            "nameEn": self.name_en,
            "color": self.color,
            "headId": self.head_id,
        }


@dataclass(frozen=True)
class RosterSnapshot:
    """Employees and departments as one consistent unit.

    ``version`` is the stored version the snapshot was loaded at; writers
    pass it back so concurrent edits are detected.
    """

    employees: tuple[Employee, ...] = ()
    departments: tuple[Department, ...] = ()
    version: int = 0

    def employee(self, employee_id: str) -> Optional[Employee]:
        return next((e for e in self.employees if e.employee_id == employee_id), None)

    def department(self, department_id: str) -> Optional[Department]:
        return next((d for d in self.departments if d.department_id == department_id), None)

    def members_of(self, department_id: str) -> tuple[Employee, ...]:
        return tuple(e for e in self.employees if e.department_id == department_id)
