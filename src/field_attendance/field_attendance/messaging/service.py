from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from typing import Callable, Iterable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import ALL_DEPARTMENTS
from ..core.enums import AudienceKind
from ..core.exceptions import UnknownDepartmentError, UnknownEmployeeError
from ..roster.repository import RosterRepository
from .model import Announcement, ChatMessage
from .repository import MessageRepository
from .router import MessageRouter

logger = logging.getLogger(__name__)


def new_message_id() -> str:
    return uuid.uuid4().hex


class MessagingService:
    """Use case: send chat messages/announcements and read a viewer's inbox."""

    def __init__(
        self,
        messages: MessageRepository,
        roster: RosterRepository,
        *,
        router: Optional[MessageRouter] = None,
        id_factory: Callable[[], str] = new_message_id,
    ):
        self._messages = messages
        self._roster = roster
        self._router = router or MessageRouter()
        self._new_id = id_factory

    def send(
        self,
        *,
        sender_id: str,
        sender_name: str,
        text: str,
        audience: AudienceKind,
        department_id: Optional[str] = None,
        recipient_ids: Iterable[str] = (),
        now: Optional[datetime] = None,
    ) -> ChatMessage:
        text = require_non_empty(text, "Message")
        message = ChatMessage(
            message_id=self._new_id(),
            sender_id=sender_id,
            sender_name=sender_name,
            text=text,
            timestamp=now or now_local(),
            audience=audience,
            department_id=department_id if audience == AudienceKind.DEPARTMENT else None,
            recipient_ids=tuple(dict.fromkeys(recipient_ids)) if audience == AudienceKind.DIRECT else (),
        )

        roster = self._roster.load_roster()
        if audience == AudienceKind.DEPARTMENT and department_id and roster.department(department_id) is None:
            raise UnknownDepartmentError(f"Unknown department {department_id}", department_id=department_id)

        recipients = self._router.resolve_audience(message, roster.employees)
        if audience == AudienceKind.DIRECT:
            missing = sorted(r for r in recipients if roster.employee(r) is None)
            if missing:
                raise UnknownEmployeeError(f"Unknown recipient(s): {', '.join(missing)}", employee_ids=missing)

        self._messages.append_message(message)
        logger.info("message=%s %s to %d recipient(s)", message.message_id, audience.value, len(recipients))
        return message

    def inbox(self, viewer_id: str, viewer_department_id: Optional[str] = None) -> list[ChatMessage]:
        if viewer_department_id is None:
            viewer = self._roster.load_roster().employee(viewer_id)
            viewer_department_id = viewer.department_id if viewer else None
        return list(self._router.visible_to(viewer_id, viewer_department_id, self._messages.load_messages()))

    def post_announcement(
        self,
        *,
        title: str,
        content: str,
        target_department_id: str = ALL_DEPARTMENTS,
        on: Optional[date] = None,
    ) -> Announcement:
        target = target_department_id or ALL_DEPARTMENTS
        if target != ALL_DEPARTMENTS and self._roster.load_roster().department(target) is None:
            raise UnknownDepartmentError(f"Unknown department {target}", department_id=target)

        announcement = Announcement(
            announcement_id=self._new_id(),
            title=require_non_empty(title, "Title"),
            content=require_non_empty(content, "Content"),
            date=on or now_local().date(),
            target_department_id=target,
        )
        self._messages.append_announcement(announcement)
        return announcement

    def announcements_for(self, department_id: Optional[str]) -> list[Announcement]:
        items = self._router.announcements_for(department_id, self._messages.load_announcements())
        return sorted(items, key=lambda a: a.date, reverse=True)
