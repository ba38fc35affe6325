from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Optional

from ..core.constants import UNASSIGNED_DEPARTMENT_ID
from ..core.enums import Role
from ..core.exceptions import (
    CrossDepartmentAssignmentError,
    UnknownDepartmentError,
    UnknownEmployeeError,
    ValidationError,
)
from .model import Department, Employee, RosterSnapshot

logger = logging.getLogger(__name__)

# Roles that survive losing a headship.
RETAINED_ROLES = frozenset({Role.ADMIN, Role.SUPERVISOR})


def derive_role(standing: Role, *, is_head: bool) -> Role:
    if is_head:
        return Role.DEPT_HEAD
    if standing in RETAINED_ROLES:
        return standing
    return Role.WORKER


def reconcile(employee: Employee, *, is_head: bool) -> Employee:
    """Role from headship; a retained role is parked in ``base_role`` meanwhile."""
    standing = derive_role(employee.standing_role, is_head=False)
    role = derive_role(standing, is_head=is_head)
    base_role = standing if is_head and standing != Role.WORKER else None
    if (role, base_role) == (employee.role, employee.base_role):
        return employee
    return replace(employee, role=role, base_role=base_role)


def heads_by_department(snapshot: RosterSnapshot) -> dict[str, str]:
    return {d.department_id: d.head_id for d in snapshot.departments if d.head_id}


class RosterConsistencyEngine:
    """Keeps department headships and employee roles mutually consistent.

    Every operation takes a ``RosterSnapshot`` and returns its successor.
    All validation happens before the successor is built, so a rejected
    operation leaves nothing half-applied. The engine does no locking;
    callers hand it a consistent snapshot and persist the result as a unit.
    """

    # ----- core transitions -------------------------------------------------

    def assign_head(self, snapshot: RosterSnapshot, department_id: str, employee_id: Optional[str]) -> RosterSnapshot:
        department = self._require_department(snapshot, department_id)
        if employee_id is not None:
            candidate = self._require_employee(snapshot, employee_id)
            if candidate.department_id != department_id:
                raise CrossDepartmentAssignmentError(
                    f"Employee {employee_id} belongs to {candidate.department_id}, not {department_id}",
                    employee_id=employee_id,
                    department_id=department_id,
                )

        previous_head = department.head_id
        departments = tuple(
            replace(d, head_id=employee_id) if d.department_id == department_id else d for d in snapshot.departments
        )
        touched = {i for i in (previous_head, employee_id) if i}
        result = self._successor(snapshot, snapshot.employees, departments, touched)
        logger.info("department=%s head %s -> %s", department_id, previous_head, employee_id)
        return result

    def remove_employee(self, snapshot: RosterSnapshot, employee_id: str) -> RosterSnapshot:
        self._require_employee(snapshot, employee_id)

        employees = tuple(e for e in snapshot.employees if e.employee_id != employee_id)
        departments = tuple(
            replace(d, head_id=None) if d.head_id == employee_id else d for d in snapshot.departments
        )
        logger.info("employee=%s removed", employee_id)
        return RosterSnapshot(employees=employees, departments=departments, version=snapshot.version)

    def remove_department(self, snapshot: RosterSnapshot, department_id: str) -> RosterSnapshot:
        self._require_department(snapshot, department_id)

        departments = tuple(d for d in snapshot.departments if d.department_id != department_id)
        members = {e.employee_id for e in snapshot.members_of(department_id)}
        employees = tuple(
            replace(e, department_id=UNASSIGNED_DEPARTMENT_ID) if e.employee_id in members else e
            for e in snapshot.employees
        )
        logger.info("department=%s removed, %d employee(s) unassigned", department_id, len(members))
        return self._successor(snapshot, employees, departments, members)

    # ----- roster editing ---------------------------------------------------

    def add_employee(self, snapshot: RosterSnapshot, employee: Employee) -> RosterSnapshot:
        if snapshot.employee(employee.employee_id) is not None:
            raise ValidationError(f"Employee {employee.employee_id} already exists")
        self._require_assignable_department(snapshot, employee.department_id)

        employees = snapshot.employees + (employee,)
        return self._successor(snapshot, employees, snapshot.departments, {employee.employee_id})

    def update_employee(self, snapshot: RosterSnapshot, employee: Employee) -> RosterSnapshot:
        current = self._require_employee(snapshot, employee.employee_id)
        self._require_assignable_department(snapshot, employee.department_id)

        departments = snapshot.departments
        if employee.department_id != current.department_id:
            # A head moving away from their department gives up the headship.
            departments = tuple(
                replace(d, head_id=None) if d.head_id == employee.employee_id else d for d in departments
            )
        employees = tuple(employee if e.employee_id == employee.employee_id else e for e in snapshot.employees)
        return self._successor(snapshot, employees, departments, {employee.employee_id})

    def add_department(self, snapshot: RosterSnapshot, department: Department) -> RosterSnapshot:
        if department.department_id == UNASSIGNED_DEPARTMENT_ID:
            raise ValidationError(f"{UNASSIGNED_DEPARTMENT_ID} is reserved")
        if snapshot.department(department.department_id) is not None:
            raise ValidationError(f"Department {department.department_id} already exists")
        if department.head_id is not None:
            raise ValidationError("Assign a head after the department exists")

        return RosterSnapshot(
            employees=snapshot.employees,
            departments=snapshot.departments + (department,),
            version=snapshot.version,
        )

    def update_department(self, snapshot: RosterSnapshot, department: Department) -> RosterSnapshot:
        """Edit name/color. Headship changes only go through ``assign_head``."""
        current = self._require_department(snapshot, department.department_id)
        updated = replace(department, head_id=current.head_id)
        departments = tuple(
            updated if d.department_id == department.department_id else d for d in snapshot.departments
        )
        return RosterSnapshot(employees=snapshot.employees, departments=departments, version=snapshot.version)

    def sync_roles(self, snapshot: RosterSnapshot) -> RosterSnapshot:
        """Repair pass: drop invalid headships, then re-derive every role.

        A headship is invalid when it points at a missing employee or at one
        from another department. Idempotent.
        """
        by_id = {e.employee_id: e for e in snapshot.employees}

        def valid(d: Department) -> bool:
            head = by_id.get(d.head_id) if d.head_id else None
            return head is not None and head.department_id == d.department_id

        departments = tuple(
            d if d.head_id is None or valid(d) else replace(d, head_id=None) for d in snapshot.departments
        )
        return self._successor(snapshot, snapshot.employees, departments, set(by_id))

    # ----- helpers ----------------------------------------------------------

    @staticmethod
    def _successor(
        snapshot: RosterSnapshot,
        employees: Iterable[Employee],
        departments: tuple[Department, ...],
        touched: set,
    ) -> RosterSnapshot:
        heads = {d.head_id for d in departments if d.head_id}
        reconciled = tuple(
            reconcile(e, is_head=e.employee_id in heads) if e.employee_id in touched else e
            for e in employees
        )
        return RosterSnapshot(employees=reconciled, departments=departments, version=snapshot.version)

    @staticmethod
    def _require_employee(snapshot: RosterSnapshot, employee_id: str) -> Employee:
        employee = snapshot.employee(employee_id)
        if employee is None:
            raise UnknownEmployeeError(f"Unknown employee {employee_id}", employee_id=employee_id)
        return employee

    @staticmethod
    def _require_department(snapshot: RosterSnapshot, department_id: str) -> Department:
        department = snapshot.department(department_id)
        if department is None:
            raise UnknownDepartmentError(f"Unknown department {department_id}", department_id=department_id)
        return department

    def _require_assignable_department(self, snapshot: RosterSnapshot, department_id: str) -> None:
        if department_id != UNASSIGNED_DEPARTMENT_ID:
            self._require_department(snapshot, department_id)
