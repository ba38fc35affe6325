from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import admin_required, api_view, login_required
from ..core.constants import ALL_DEPARTMENTS
from ..core.enums import ReportKind
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    @app.route("/api/reports", methods=["POST"], endpoint="submit_report")
    @login_required
    @api_view
    def submit_report():
        data = request.get_json(silent=True) or {}
        try:
            kind = ReportKind(data.get("type") or ReportKind.TEXT.value)
        except ValueError:
            raise ValidationError("Report type must be text, link or file")

        report = reports.submit(
            employee_id=session["employee_id"],
            content=data.get("content", ""),
            kind=kind,
            attachment_ref=data.get("attachmentUrl"),
        )
        return jsonify({"success": True, "report": report.to_dict()}), 201

    @app.route("/api/reports", endpoint="list_reports")
    @admin_required
    @api_view
    def list_reports():
        department = request.args.get("departmentId") or ALL_DEPARTMENTS
        items = reports.active(department_filter=department)
        return jsonify({"success": True, "reports": [r.to_dict() for r in items]})
