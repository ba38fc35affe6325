from __future__ import annotations

import threading
from dataclasses import replace
from typing import Iterable, Optional, Sequence

from ..attendance.ledger import AttendanceLedger
from ..attendance.model import AttendanceEvent
from ..core.exceptions import ConcurrentModificationError
from ..messaging.model import Announcement, ChatMessage
from ..reports.model import Report
from ..roster.model import Department, Employee, RosterSnapshot
from ..shifts.model import ShiftWindow


class InMemoryStore:
    """Process-local persistence collaborator for every collection.

    Writes are serialized by one lock; the roster carries a version counter
    for optimistic concurrency. Used by the ``memory`` storage setting and
    by tests.
    """

    def __init__(
        self,
        *,
        employees: Iterable[Employee] = (),
        departments: Iterable[Department] = (),
        events: Iterable[AttendanceEvent] = (),
        reports: Iterable[Report] = (),
        messages: Iterable[ChatMessage] = (),
        announcements: Iterable[Announcement] = (),
    ):
        self._lock = threading.Lock()
        self._roster = RosterSnapshot(employees=tuple(employees), departments=tuple(departments), version=0)
        self._events: list[AttendanceEvent] = list(events)
        self._reports: list[Report] = list(reports)
        self._messages: list[ChatMessage] = list(messages)
        self._announcements: list[Announcement] = list(announcements)

    # roster
    def load_roster(self) -> RosterSnapshot:
        return self._roster

    def save_roster(self, snapshot: RosterSnapshot, *, expected_version: int) -> RosterSnapshot:
        with self._lock:
            if self._roster.version != expected_version:
                raise ConcurrentModificationError(
                    f"Roster changed (version {self._roster.version}, expected {expected_version})"
                )
            self._roster = replace(snapshot, version=expected_version + 1)
            return self._roster

    # attendance
    def load_events(self) -> Sequence[AttendanceEvent]:
        return tuple(self._events)

    def append_event(self, event: AttendanceEvent, shift: Optional[ShiftWindow] = None) -> None:
        with self._lock:
            AttendanceLedger(self._events).record(event, shift=shift)
            self._events.append(event)

    # reports
    def load_reports(self) -> Sequence[Report]:
        return tuple(self._reports)

    def append_report(self, report: Report) -> None:
        with self._lock:
            self._reports.append(report)

    # messaging
    def load_messages(self) -> Sequence[ChatMessage]:
        return tuple(self._messages)

    def append_message(self, message: ChatMessage) -> None:
        with self._lock:
            self._messages.append(message)

    def load_announcements(self) -> Sequence[Announcement]:
        return tuple(self._announcements)

    def append_announcement(self, announcement: Announcement) -> None:
        with self._lock:
            self._announcements.append(announcement)
