from __future__ import annotations

import logging
import uuid
from collections import Counter
from datetime import date, datetime, timedelta
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_SITE_RADIUS_METERS
from ..core.enums import AttendanceStatus, EventKind
from ..core.exceptions import LocationUnavailableError, UnknownEmployeeError, ValidationError
from ..geo.model import GeoPoint, Site
from ..roster.repository import RosterRepository
from .classifier import AttendanceClassifier
from .ledger import AttendanceLedger, DateRange
from .model import AttendanceEvent, PresenceOverview
from .repository import AttendanceEventRepository

logger = logging.getLogger(__name__)


def new_event_id() -> str:
    return uuid.uuid4().hex


class AttendanceService:
    """Use case: capture check-in/out and read the attendance ledger."""

    def __init__(
        self,
        events: AttendanceEventRepository,
        roster: RosterRepository,
        *,
        classifier: Optional[AttendanceClassifier] = None,
        company_site: Optional[Site] = None,
        default_radius_m: float = DEFAULT_SITE_RADIUS_METERS,
        id_factory: Callable[[], str] = new_event_id,
    ):
        self._events = events
        self._roster = roster
        self._classifier = classifier or AttendanceClassifier()
        self._company_site = company_site
        self._default_radius_m = float(default_radius_m)
        self._new_id = id_factory

    def ledger(self) -> AttendanceLedger:
        return AttendanceLedger.from_events(self._events.load_events())

    def capture(
        self,
        employee_id: str,
        kind: EventKind,
        *,
        position: Optional[GeoPoint],
        photo_ref: str,
        now: Optional[datetime] = None,
    ) -> AttendanceEvent:
        if position is None:
            raise LocationUnavailableError("No position was captured", employee_id=employee_id)
        if not photo_ref:
            raise ValidationError("A photo is required")

        now = now or now_local()
        employee = self._roster.load_roster().employee(employee_id)
        if not employee:
            raise UnknownEmployeeError(f"Unknown employee {employee_id}", employee_id=employee_id)

        ledger = self.ledger()
        if kind == EventKind.OUT and ledger.find_in_shift(employee_id, EventKind.IN, now, employee.shift) is None:
            raise ValidationError("No check-in recorded for this shift")

        # Fixed workplace first, then the company site, else the geofence policy decides.
        site = employee.site(self._default_radius_m) or self._company_site
        decision = self._classifier.assess(
            kind=kind,
            position=position,
            site=site,
            shift=employee.shift,
            timestamp=now,
        )
        event = AttendanceEvent(
            event_id=self._new_id(),
            employee_id=employee.employee_id,
            employee_name=employee.name,
            kind=kind,
            timestamp=now,
            photo_ref=photo_ref,
            position=position,
            status=decision.status,
            department_id=employee.department_id,
            distance_m=decision.distance_m,
            note=decision.note,
        )

        # Duplicate check and append are one step in the store.
        self._events.append_event(event, shift=employee.shift)
        return event

    def check_in(self, employee_id: str, **kwargs) -> AttendanceEvent:
        return self.capture(employee_id, EventKind.IN, **kwargs)

    def check_out(self, employee_id: str, **kwargs) -> AttendanceEvent:
        return self.capture(employee_id, EventKind.OUT, **kwargs)

    def history(
        self,
        *,
        employee_id: Optional[str] = None,
        date_range: Optional[DateRange] = None,
        department_id: Optional[str] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> list[AttendanceEvent]:
        events = self.ledger().query(employee_id=employee_id, date_range=date_range, department_id=department_id)
        out = []
        for event in events:
            if len(out) >= limit:
                break
            out.append(event)
        return out

    def presence_overview(self, day: date) -> PresenceOverview:
        """Counts for the admin overview; shift-required employees without a
        check-in for that work date are reported absent.

        Check-ins are grouped by the date their shift occurrence started, so
        an overnight check-in after midnight counts for the previous day.
        """
        roster = self._roster.load_roster()

        def work_date(event: AttendanceEvent) -> date:
            employee = roster.employee(event.employee_id)
            if employee is not None and employee.shift is not None:
                return employee.shift.work_date_for(event.timestamp)
            return event.timestamp.date()

        candidates = self.ledger().query(date_range=(day, day + timedelta(days=1)))
        check_ins = [e for e in candidates if e.kind == EventKind.IN and work_date(e) == day]

        checked_in = {e.employee_id for e in check_ins}
        absent = tuple(
            sorted(e.employee_id for e in roster.employees if e.is_shift_required and e.employee_id not in checked_in)
        )

        by_status = Counter(e.status.value for e in check_ins)
        by_status[AttendanceStatus.ABSENT.value] = len(absent)
        return PresenceOverview(
            day=day.isoformat(),
            checked_in=len(checked_in),
            by_status={s.value: by_status.get(s.value, 0) for s in AttendanceStatus},
            absent_employee_ids=absent,
        )
