from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..shifts.model import ShiftWindow
from .model import AttendanceEvent


class AttendanceEventRepository(Protocol):
    def load_events(self) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def append_event(self, event: AttendanceEvent, shift: Optional[ShiftWindow] = None) -> None:
        """Append unless the employee already has this kind of event in the
        same shift occurrence (``DuplicateEventError``).

        The check and the append happen as one step against the stored events.
        """

        raise NotImplementedError
