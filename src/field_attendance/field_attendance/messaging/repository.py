from __future__ import annotations

from typing import Protocol, Sequence

from .model import Announcement, ChatMessage


class MessageRepository(Protocol):
    def load_messages(self) -> Sequence[ChatMessage]:
        raise NotImplementedError

    def append_message(self, message: ChatMessage) -> None:
        raise NotImplementedError

    def load_announcements(self) -> Sequence[Announcement]:
        raise NotImplementedError

    def append_announcement(self, announcement: Announcement) -> None:
        raise NotImplementedError
