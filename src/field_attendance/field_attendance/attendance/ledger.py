from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, Iterator, Optional, Tuple

from ..core.enums import EventKind
from ..core.exceptions import DuplicateEventError
from ..shifts.model import ShiftWindow
from .model import AttendanceEvent

logger = logging.getLogger(__name__)

DateRange = Tuple[date, date]


def shift_occurrence_key(moment: datetime, shift: Optional[ShiftWindow]) -> datetime:
    """Identify the shift occurrence ``moment`` falls in.

    Without a shift the occurrence is the calendar day.
    """
    if shift is None:
        return datetime.combine(moment.date(), datetime.min.time())
    return shift.occurrence_start(moment)


class AttendanceLedger:
    """Append-only collection of attendance events.

    ``record`` rejects a second event of the same kind for the same employee
    within one shift occurrence. ``query`` is a lazy, most-recent-first view;
    each call starts a fresh iteration over the events held at that moment.
    The ledger never computes statistics; callers aggregate over ``query``.
    """

    def __init__(self, events: Iterable[AttendanceEvent] = ()):
        self._events: list[AttendanceEvent] = list(events)

    @classmethod
    def from_events(cls, events: Iterable[AttendanceEvent]) -> "AttendanceLedger":
        return cls(events)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[AttendanceEvent]:
        return iter(tuple(self._events))

    def snapshot(self) -> tuple[AttendanceEvent, ...]:
        return tuple(self._events)

    def find_in_shift(
        self,
        employee_id: str,
        kind: EventKind,
        moment: datetime,
        shift: Optional[ShiftWindow] = None,
    ) -> Optional[AttendanceEvent]:
        key = shift_occurrence_key(moment, shift)
        for event in self._events:
            if (
                event.employee_id == employee_id
                and event.kind == kind
                and shift_occurrence_key(event.timestamp, shift) == key
            ):
                return event
        return None

    def record(self, event: AttendanceEvent, shift: Optional[ShiftWindow] = None) -> AttendanceEvent:
        if self.find_in_shift(event.employee_id, event.kind, event.timestamp, shift) is not None:
            logger.warning(
                "duplicate %s rejected for employee=%s at %s",
                event.kind.value,
                event.employee_id,
                event.timestamp.isoformat(),
            )
            raise DuplicateEventError(
                f"{event.kind.value} already recorded for this shift",
                employee_id=event.employee_id,
                kind=event.kind.value,
            )

        self._events.append(event)
        logger.info("recorded %s for employee=%s status=%s", event.kind.value, event.employee_id, event.status.value)
        return event

    def query(
        self,
        employee_id: Optional[str] = None,
        date_range: Optional[DateRange] = None,
        department_id: Optional[str] = None,
    ) -> Iterator[AttendanceEvent]:
        """Events matching every given filter, most recent first.

        ``date_range`` is an inclusive ``(start, end)`` pair of dates.
        """
        ordered = sorted(self._events, key=lambda e: e.timestamp, reverse=True)
        for event in ordered:
            if employee_id is not None and event.employee_id != employee_id:
                continue
            if department_id is not None and event.department_id != department_id:
                continue
            if date_range is not None:
                start, end = date_range
                if not start <= event.timestamp.date() <= end:
                    continue
            yield event
