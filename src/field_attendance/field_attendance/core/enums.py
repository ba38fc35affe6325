from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Employee role. DEPT_HEAD is derived from department headships."""

    WORKER = "WORKER"
    SUPERVISOR = "SUPERVISOR"
    DEPT_HEAD = "DEPT_HEAD"
    ADMIN = "ADMIN"


class AttendanceStatus(str, Enum):
    PRESENT = "PRESENT"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    LATE = "LATE"
    ABSENT = "ABSENT"


class EventKind(str, Enum):
    IN = "IN"
    OUT = "OUT"


class AudienceKind(str, Enum):
    BROADCAST = "broadcast"
    DEPARTMENT = "department"
    DIRECT = "direct"


class ReportKind(str, Enum):
    TEXT = "text"
    LINK = "link"
    FILE = "file"


class GeofencePolicy(str, Enum):
    """What the classifier does when an employee has no reference site."""

    UNRESTRICTED = "unrestricted"
    STRICT = "strict"


class ErrorKind(str, Enum):
    """Recoverable failure kinds surfaced by the core."""

    LOCATION_UNAVAILABLE = "LocationUnavailable"
    DUPLICATE_EVENT = "DuplicateEvent"
    CROSS_DEPARTMENT_ASSIGNMENT = "CrossDepartmentAssignment"
    EMPTY_AUDIENCE = "EmptyAudience"
    UNKNOWN_EMPLOYEE = "UnknownEmployee"
    UNKNOWN_DEPARTMENT = "UnknownDepartment"
