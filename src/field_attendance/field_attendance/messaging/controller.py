from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import admin_required, api_view, login_required
from ..core.constants import ALL_DEPARTMENTS
from ..core.enums import AudienceKind
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    messaging = container.messaging_service

    @app.route("/api/messages", methods=["POST"], endpoint="send_message")
    @login_required
    @api_view
    def send_message():
        data = request.get_json(silent=True) or {}
        try:
            audience = AudienceKind(data.get("audience") or AudienceKind.DEPARTMENT.value)
        except ValueError:
            raise ValidationError("Unknown audience")

        recipient_ids = data.get("recipientIds") or []
        if not isinstance(recipient_ids, list) or not all(isinstance(r, str) for r in recipient_ids):
            raise ValidationError("recipientIds must be a list of employee ids")

        me = container.roster_service.get(session["employee_id"])
        if audience == AudienceKind.BROADCAST and not me.is_admin:
            raise ValidationError("Only administrators can broadcast")
        department_id = data.get("departmentId") or None
        if audience == AudienceKind.DEPARTMENT and not department_id:
            department_id = me.department_id

        message = messaging.send(
            sender_id=me.employee_id,
            sender_name=me.name,
            text=data.get("text", ""),
            audience=audience,
            department_id=department_id,
            recipient_ids=recipient_ids,
        )
        return jsonify({"success": True, "message": message.to_dict()}), 201

    @app.route("/api/messages", endpoint="inbox")
    @login_required
    @api_view
    def inbox():
        messages = messaging.inbox(session["employee_id"])
        return jsonify({"success": True, "messages": [m.to_dict() for m in messages]})

    @app.route("/api/announcements", methods=["POST"], endpoint="post_announcement")
    @admin_required
    @api_view
    def post_announcement():
        data = request.get_json(silent=True) or {}
        announcement = messaging.post_announcement(
            title=data.get("title", ""),
            content=data.get("content", ""),
            target_department_id=data.get("targetDeptId") or ALL_DEPARTMENTS,
        )
        return jsonify({"success": True, "announcement": announcement.to_dict()}), 201

    @app.route("/api/announcements", endpoint="announcements")
    @login_required
    @api_view
    def announcements():
        me = container.roster_service.get(session["employee_id"])
        items = messaging.announcements_for(me.department_id)
        return jsonify({"success": True, "announcements": [a.to_dict() for a in items]})
