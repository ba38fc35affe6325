from __future__ import annotations

import io
from dataclasses import replace

from flask import Flask, jsonify, request, send_file, session

from ..common.web import admin_required, api_view, current_employee, login_required
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container
from ..geo.model import GeoPoint
from ..identity.qr import encode_identity, render_identity_qr, scan_identity_image
from ..roster.model import Department
from ..shifts.model import ShiftWindow


def _parse_shift(data: dict):
    start, end = data.get("shiftStart"), data.get("shiftEnd")
    if not start or not end:
        return None
    try:
        return ShiftWindow.parse(start, end)
    except ValueError:
        raise ValidationError("Shift times must be HH:MM")


def _parse_location(data: dict):
    location = data.get("workplaceLocation")
    if not location:
        return None
    try:
        return GeoPoint.parse(location["lat"], location["lng"])
    except (KeyError, TypeError, ValueError):
        raise ValidationError("Workplace location needs numeric lat and lng")


def _roster_payload(snapshot) -> dict:
    return {
        "success": True,
        "version": snapshot.version,
        "employees": [e.to_dict() for e in snapshot.employees],
        "departments": [d.to_dict() for d in snapshot.departments],
    }


def register(app: Flask, container: Container) -> None:
    roster = container.roster_service

    @app.route("/api/login", methods=["POST"], endpoint="login")
    @api_view
    def login():
        data = request.get_json(silent=True) or {}
        employee = roster.authenticate(data.get("login", ""), data.get("password", ""))
        session.clear()
        session["employee_id"] = employee.employee_id
        session["role"] = employee.role.value
        session["name"] = employee.name
        return jsonify({"success": True, "employee": employee.to_dict()})

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/me", endpoint="me")
    @login_required
    @api_view
    def me():
        return jsonify({"success": True, "employee": roster.get(session["employee_id"]).to_dict()})

    @app.route("/api/roster", endpoint="roster")
    @login_required
    @api_view
    def roster_view():
        return jsonify(_roster_payload(roster.snapshot()))

    @app.route("/api/employees", methods=["POST"], endpoint="create_employee")
    @admin_required
    @api_view
    def create_employee():
        data = request.get_json(silent=True) or {}
        try:
            role = Role(data.get("userRole") or Role.WORKER.value)
        except ValueError:
            raise ValidationError("Unknown role")

        employee = roster.create_employee(
            name=data.get("name", ""),
            department_id=data.get("departmentId", ""),
            password=data.get("password", ""),
            phone=data.get("phone", ""),
            role=role,
            shift=_parse_shift(data),
            is_shift_required=bool(data.get("isShiftRequired")),
            workplace=data.get("workplace", ""),
            workplace_location=_parse_location(data),
        )
        return jsonify({"success": True, "employee": employee.to_dict()}), 201

    @app.route("/api/employees/<employee_id>", methods=["PUT"], endpoint="update_employee")
    @admin_required
    @api_view
    def update_employee(employee_id: str):
        data = request.get_json(silent=True) or {}
        current = roster.get(employee_id)
        updated = replace(
            current,
            name=data.get("name", current.name),
            phone=data.get("phone", current.phone),
            department_id=data.get("departmentId", current.department_id),
            is_shift_required=bool(data.get("isShiftRequired", current.is_shift_required)),
            shift=_parse_shift(data) if "shiftStart" in data else current.shift,
            workplace=data.get("workplace", current.workplace),
            workplace_location=_parse_location(data) if "workplaceLocation" in data else current.workplace_location,
        )
        return jsonify(_roster_payload(roster.update_employee(updated)))

    @app.route("/api/employees/<employee_id>", methods=["DELETE"], endpoint="delete_employee")
    @admin_required
    @api_view
    def delete_employee(employee_id: str):
        if employee_id == session.get("employee_id"):
            raise ValidationError("You cannot delete your own account")
        return jsonify(_roster_payload(roster.remove_employee(employee_id)))

    @app.route("/api/departments", methods=["POST"], endpoint="create_department")
    @admin_required
    @api_view
    def create_department():
        data = request.get_json(silent=True) or {}
        snapshot = roster.add_department(
            department_id=data.get("id", ""),
            name=data.get("name", ""),
            name_en=data.get("nameEn", ""),
            color=data.get("color", ""),
        )
        return jsonify(_roster_payload(snapshot)), 201

    @app.route("/api/departments/<department_id>", methods=["PUT"], endpoint="update_department")
    @admin_required
    @api_view
    def update_department(department_id: str):
        data = request.get_json(silent=True) or {}
        department = Department(
            department_id=department_id,
            name=data.get("name", ""),
            name_en=data.get("nameEn", ""),
            color=data.get("color", ""),
        )
        return jsonify(_roster_payload(roster.update_department(department)))

    @app.route("/api/departments/<department_id>", methods=["DELETE"], endpoint="delete_department")
    @admin_required
    @api_view
    def delete_department(department_id: str):
        return jsonify(_roster_payload(roster.remove_department(department_id)))

    @app.route("/api/departments/<department_id>/head", methods=["POST"], endpoint="assign_head")
    @admin_required
    @api_view
    def assign_head(department_id: str):
        data = request.get_json(silent=True) or {}
        return jsonify(_roster_payload(roster.assign_head(department_id, data.get("employeeId") or None)))

    @app.route("/api/employees/<employee_id>/qr", endpoint="employee_qr")
    @login_required
    @api_view
    def employee_qr(employee_id: str):
        viewer = current_employee()
        if viewer is None or (employee_id != viewer.employee_id and not viewer.is_admin):
            return jsonify({"success": False, "error": "Authorization", "message": "Not your card"}), 403
        png = render_identity_qr(encode_identity(roster.get(employee_id)))
        return send_file(io.BytesIO(png), mimetype="image/png")

    @app.route("/api/identity/resolve", methods=["POST"], endpoint="identity_resolve")
    @admin_required
    @api_view
    def identity_resolve():
        data = request.get_json(silent=True) or {}
        return jsonify({"success": True, "employee": roster.lookup_identity(data.get("payload", "")).to_dict()})

    @app.route("/api/identity/scan", methods=["POST"], endpoint="identity_scan")
    @admin_required
    @api_view
    def identity_scan():
        if "image" not in request.files:
            raise ValidationError("Missing image file")
        identity = scan_identity_image(request.files["image"].stream)
        return jsonify({"success": True, "employee": roster.get(identity.employee_id).to_dict()})
