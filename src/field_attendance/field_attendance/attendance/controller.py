from __future__ import annotations

import logging
from datetime import date

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_date
from ..common.web import admin_required, api_view, login_required
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import EventKind
from ..core.exceptions import LocationUnavailableError, ValidationError
from ..container import Container
from ..geo.model import GeoPoint

logger = logging.getLogger(__name__)


def _parse_position(data: dict):
    lat, lng = data.get("lat"), data.get("lng")
    if lat is None or lng is None:
        return None
    try:
        return GeoPoint.parse(lat, lng)
    except (TypeError, ValueError):
        raise ValidationError("Invalid coordinates")


def _parse_range():
    start_s, end_s = request.args.get("start"), request.args.get("end")
    if not start_s and not end_s:
        return None
    try:
        start = parse_iso_date(start_s) if start_s else date.min
        end = parse_iso_date(end_s) if end_s else date.max
    except ValueError:
        raise ValidationError("Dates must be YYYY-MM-DD")
    if end < start:
        raise ValidationError("End date must be on or after start date")
    return start, end


def _parse_limit(default: int) -> int:
    try:
        limit = int(request.args.get("limit") or default)
    except ValueError:
        raise ValidationError("Limit must be a number")
    if limit < 1:
        raise ValidationError("Limit must be positive")
    return limit


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service

    @app.route("/api/attendance/capture/<kind>", methods=["POST"], endpoint="attendance_capture")
    @login_required
    @api_view
    def capture(kind: str):
        try:
            event_kind = EventKind(kind.upper())
        except ValueError:
            raise ValidationError("Kind must be IN or OUT")

        data = request.get_json(silent=True) or {}
        position = _parse_position(data)
        if position is None:
            # The device could not (or would not) produce a fix.
            raise LocationUnavailableError("Location unavailable, please retry")

        event = attendance.capture(
            session["employee_id"],
            event_kind,
            position=position,
            photo_ref=data.get("photo", ""),
        )
        return jsonify({"success": True, "event": event.to_dict()}), 201

    @app.route("/api/attendance/me", endpoint="attendance_mine")
    @login_required
    @api_view
    def mine():
        events = attendance.history(
            employee_id=session["employee_id"], date_range=_parse_range(), limit=_parse_limit(DEFAULT_HISTORY_LIMIT)
        )
        return jsonify({"success": True, "events": [e.to_dict() for e in events]})

    @app.route("/api/attendance", endpoint="attendance_list")
    @admin_required
    @api_view
    def list_events():
        events = attendance.history(
            employee_id=request.args.get("employeeId") or None,
            department_id=request.args.get("departmentId") or None,
            date_range=_parse_range(),
            limit=_parse_limit(500),
        )
        return jsonify({"success": True, "events": [e.to_dict() for e in events]})

    @app.route("/api/attendance/overview", endpoint="attendance_overview")
    @admin_required
    @api_view
    def overview():
        day_s = request.args.get("day")
        try:
            day = parse_iso_date(day_s) if day_s else date.today()
        except ValueError:
            raise ValidationError("Day must be YYYY-MM-DD")
        o = attendance.presence_overview(day)
        return jsonify(
            {
                "success": True,
                "day": o.day,
                "checkedIn": o.checked_in,
                "byStatus": o.by_status,
                "absent": list(o.absent_employee_ids),
            }
        )

    @app.route("/api/attendance/summary", methods=["POST"], endpoint="attendance_summary")
    @admin_required
    @api_view
    def summary():
        text = container.summary_service.summarize_recent(attendance.ledger())
        return jsonify({"success": True, "summary": text})
