from __future__ import annotations

from .enums import ErrorKind


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConcurrentModificationError(DomainError):
    """Raised when a collection was saved by someone else since it was loaded."""


class SummaryUnavailableError(DomainError):
    """Raised when the external summary collaborator fails."""


class CoreError(DomainError):
    """A typed, recoverable failure. ``kind`` lets callers pick a message."""

    kind: ErrorKind

    def __init__(self, message: str = "", **details):
        super().__init__(message or self.kind.value)
        self.details = details


class LocationUnavailableError(CoreError):
    kind = ErrorKind.LOCATION_UNAVAILABLE


class DuplicateEventError(CoreError):
    kind = ErrorKind.DUPLICATE_EVENT


class CrossDepartmentAssignmentError(CoreError):
    kind = ErrorKind.CROSS_DEPARTMENT_ASSIGNMENT


class EmptyAudienceError(CoreError):
    kind = ErrorKind.EMPTY_AUDIENCE


class UnknownEmployeeError(CoreError):
    kind = ErrorKind.UNKNOWN_EMPLOYEE


class UnknownDepartmentError(CoreError):
    kind = ErrorKind.UNKNOWN_DEPARTMENT


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""
