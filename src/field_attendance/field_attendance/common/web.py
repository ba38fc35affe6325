from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import current_app, jsonify, session

from ..core.enums import ErrorKind
from ..core.exceptions import (
    AuthenticationError,
    ConcurrentModificationError,
    CoreError,
    DomainError,
    SummaryUnavailableError,
)
from ..roster.model import Employee

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.UNKNOWN_EMPLOYEE: 404,
    ErrorKind.UNKNOWN_DEPARTMENT: 404,
    ErrorKind.DUPLICATE_EVENT: 409,
    ErrorKind.CROSS_DEPARTMENT_ASSIGNMENT: 422,
    ErrorKind.EMPTY_AUDIENCE: 422,
    ErrorKind.LOCATION_UNAVAILABLE: 422,
}


def error_response(exc: DomainError):
    if isinstance(exc, CoreError):
        return jsonify({"success": False, "error": exc.kind.value, "message": str(exc)}), STATUS_BY_KIND[exc.kind]
    if isinstance(exc, AuthenticationError):
        return jsonify({"success": False, "error": "Authentication", "message": str(exc)}), 401
    if isinstance(exc, ConcurrentModificationError):
        return jsonify({"success": False, "error": "ConcurrentModification", "message": str(exc)}), 409
    if isinstance(exc, SummaryUnavailableError):
        return jsonify({"success": False, "error": "SummaryUnavailable", "message": str(exc)}), 503
    return jsonify({"success": False, "error": "Validation", "message": str(exc)}), 400


def api_view(view):
    """Map domain errors to JSON replies; anything else is a logged 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            logger.info("%s rejected: %s", view.__name__, e)
            return error_response(e)
        except Exception:
            logger.exception("%s failed", view.__name__)
            return jsonify({"success": False, "error": "Internal", "message": "Internal error"}), 500

    return wrapper


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "employee_id" not in session:
            return jsonify({"success": False, "error": "Authentication", "message": "Login required"}), 401
        return view(*args, **kwargs)

    return wrapper


def current_employee() -> Optional[Employee]:
    """The logged-in employee as the roster has them now, not as at login."""
    employee_id = session.get("employee_id")
    if employee_id is None:
        return None
    container = current_app.extensions["field_attendance"]
    return container.roster_repo.load_roster().employee(employee_id)


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        employee = current_employee()
        if employee is None:
            session.clear()
            return jsonify({"success": False, "error": "Authentication", "message": "Login required"}), 401
        if not employee.is_admin:
            return jsonify({"success": False, "error": "Authorization", "message": "Admins only"}), 403
        return view(*args, **kwargs)

    return wrapper
