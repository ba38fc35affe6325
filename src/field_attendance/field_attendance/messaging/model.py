from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AudienceKind


@dataclass(frozen=True)
class ChatMessage:
    """Immutable once sent."""

    message_id: str
    sender_id: str
    sender_name: str
    text: str
    timestamp: datetime
    audience: AudienceKind
    department_id: Optional[str] = None
    recipient_ids: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.message_id,
            "senderId": self.sender_id,
            "senderName": self.sender_name,
            "text": self.text,
            "timestamp": self.timestamp.isoformat(),
            "audience": self.audience.value,
            "departmentId": self.department_id,
            "recipientIds": list(self.recipient_ids),
        }


@dataclass(frozen=True)
class Announcement:
    announcement_id: str
    title: str
    content: str
    date: date
    target_department_id: str

    def to_dict(self) -> dict:
        return {
            "id": self.announcement_id,
            "title": self.title,
            "content": self.content,
            "date": self.date.isoformat(),
            "targetDeptId": self.target_department_id,
        }
