from __future__ import annotations

from datetime import datetime, time

import pytest

from src.field_attendance.field_attendance.core.enums import Role
from src.field_attendance.field_attendance.roster.model import Department, Employee, RosterSnapshot
from src.field_attendance.field_attendance.shifts.model import ShiftWindow
from src.field_attendance.field_attendance.store.memory import InMemoryStore


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 8, 25, 0)


@pytest.fixture
def day_shift() -> ShiftWindow:
    return ShiftWindow(start_time=time(8, 30), end_time=time(16, 30))


@pytest.fixture
def roster(day_shift) -> RosterSnapshot:
    """Two departments; D1 is headed by E1."""
    employees = (
        Employee(employee_id="E1", name="Ali", department_id="D1", role=Role.DEPT_HEAD, shift=day_shift),
        Employee(employee_id="E2", name="Sara", department_id="D1", shift=day_shift, is_shift_required=True),
        Employee(employee_id="E3", name="Omar", department_id="D2"),
        Employee(employee_id="E4", name="Huda", department_id="D2", role=Role.SUPERVISOR),
        Employee(employee_id="A1", name="Admin", department_id="D2", role=Role.ADMIN),
    )
    departments = (
        Department(department_id="D1", name="Maintenance", color="blue", head_id="E1"),
        Department(department_id="D2", name="Security", color="red"),
    )
    return RosterSnapshot(employees=employees, departments=departments)


@pytest.fixture
def store(roster) -> InMemoryStore:
    return InMemoryStore(employees=roster.employees, departments=roster.departments)
