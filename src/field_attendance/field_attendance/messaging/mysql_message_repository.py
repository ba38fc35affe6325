from __future__ import annotations

import json
from typing import Sequence

from ..core.enums import AudienceKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Announcement, ChatMessage
from .repository import MessageRepository


class MySQLMessageRepository(MessageRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load_messages(self) -> Sequence[ChatMessage]:
        # seq keeps send order when timestamps tie
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT message_id, sender_id, sender_name, text, ts, audience, department_id, recipient_ids
                FROM chat_messages
                ORDER BY seq ASC
                """
            )
            return [
                ChatMessage(
                    message_id=r["message_id"],
                    sender_id=r["sender_id"],
                    sender_name=r.get("sender_name") or "",
                    text=r["text"],
                    timestamp=r["ts"],
                    audience=AudienceKind(r["audience"]),
                    department_id=r.get("department_id"),
                    recipient_ids=tuple(json.loads(r["recipient_ids"])) if r.get("recipient_ids") else (),
                )
                for r in fetchall(cur)
            ]

    def append_message(self, message: ChatMessage) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO chat_messages(message_id, sender_id, sender_name, text, ts, audience,
                                          department_id, recipient_ids)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    message.message_id,
                    message.sender_id,
                    message.sender_name,
                    message.text,
                    message.timestamp,
                    message.audience.value,
                    message.department_id,
                    json.dumps(list(message.recipient_ids)) if message.recipient_ids else None,
                ),
            )

    def load_announcements(self) -> Sequence[Announcement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT announcement_id, title, content, announced_on, target_department_id
                FROM announcements
                ORDER BY announced_on DESC
                """
            )
            return [
                Announcement(
                    announcement_id=r["announcement_id"],
                    title=r["title"],
                    content=r["content"],
                    date=r["announced_on"],
                    target_department_id=r["target_department_id"],
                )
                for r in fetchall(cur)
            ]

    def append_announcement(self, announcement: Announcement) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO announcements(announcement_id, title, content, announced_on, target_department_id)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    announcement.announcement_id,
                    announcement.title,
                    announcement.content,
                    announcement.date,
                    announcement.target_department_id,
                ),
            )
