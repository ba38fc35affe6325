from __future__ import annotations

from typing import Iterable, Iterator, Optional

from ..core.constants import ALL_DEPARTMENTS
from ..core.enums import AudienceKind
from ..core.exceptions import EmptyAudienceError, ValidationError
from ..roster.model import Employee
from .model import Announcement, ChatMessage


class MessageRouter:
    """Resolves message audiences and filters history per viewer.

    Pure filtering over immutable history; nothing is rewritten or deleted.
    """

    def resolve_audience(self, message: ChatMessage, employees: Iterable[Employee]) -> frozenset[str]:
        if message.audience == AudienceKind.BROADCAST:
            return frozenset(e.employee_id for e in employees)

        if message.audience == AudienceKind.DEPARTMENT:
            if not message.department_id:
                raise ValidationError("Department message without a target department")
            return frozenset(e.employee_id for e in employees if e.department_id == message.department_id)

        if not message.recipient_ids:
            raise EmptyAudienceError("Direct message needs at least one recipient", message_id=message.message_id)
        return frozenset(message.recipient_ids)

    def is_visible(self, message: ChatMessage, viewer_id: str, viewer_department_id: Optional[str]) -> bool:
        if message.sender_id == viewer_id:
            return True
        if message.audience == AudienceKind.BROADCAST:
            return True
        if message.audience == AudienceKind.DEPARTMENT:
            return viewer_department_id is not None and message.department_id == viewer_department_id
        return viewer_id in message.recipient_ids

    def visible_to(
        self,
        viewer_id: str,
        viewer_department_id: Optional[str],
        history: Iterable[ChatMessage],
    ) -> Iterator[ChatMessage]:
        """Messages the viewer sent or is addressed by, in original order."""
        for message in history:
            if self.is_visible(message, viewer_id, viewer_department_id):
                yield message

    def announcements_for(
        self,
        department_id: Optional[str],
        announcements: Iterable[Announcement],
    ) -> Iterator[Announcement]:
        for announcement in announcements:
            target = announcement.target_department_id
            if target == ALL_DEPARTMENTS or (department_id is not None and target == department_id):
                yield announcement
