import threading
from dataclasses import replace
from datetime import date, datetime, time

import pytest

from src.field_attendance.field_attendance.attendance.classifier import AttendanceClassifier
from src.field_attendance.field_attendance.attendance.service import AttendanceService
from src.field_attendance.field_attendance.core.enums import AttendanceStatus, EventKind, GeofencePolicy
from src.field_attendance.field_attendance.core.exceptions import (
    DuplicateEventError,
    LocationUnavailableError,
    UnknownEmployeeError,
    ValidationError,
)
from src.field_attendance.field_attendance.geo.model import GeoPoint, Site
from src.field_attendance.field_attendance.shifts.model import ShiftWindow
from src.field_attendance.field_attendance.store.memory import InMemoryStore

SITE = Site(location=GeoPoint(24.7136, 46.6753), radius_m=100)
ON_SITE = GeoPoint(24.7136, 46.6754)
FAR_AWAY = GeoPoint(24.80, 46.70)


def make_service(store, **kwargs):
    counter = iter(range(1, 1000))
    kwargs.setdefault("company_site", SITE)
    return AttendanceService(store, store, id_factory=lambda: f"ev{next(counter)}", **kwargs)


def test_check_in_on_site_and_on_time(store, fixed_now):
    service = make_service(store)

    event = service.check_in("E2", position=ON_SITE, photo_ref="photo://1", now=fixed_now)

    assert event.status == AttendanceStatus.PRESENT
    assert event.department_id == "D1"
    assert event.employee_name == "Sara"
    assert store.load_events() == (event,)


def test_check_in_far_away_is_out_of_bounds(store, fixed_now):
    event = make_service(store).check_in("E2", position=FAR_AWAY, photo_ref="photo://1", now=fixed_now)
    assert event.status == AttendanceStatus.OUT_OF_BOUNDS
    assert event.distance_m > 100


def test_late_check_in(store):
    event = make_service(store).check_in(
        "E2", position=ON_SITE, photo_ref="photo://1", now=datetime(2026, 2, 2, 9, 0)
    )
    assert event.status == AttendanceStatus.LATE
    assert event.note == "30 min after shift start"


def test_employee_workplace_overrides_company_site(roster, fixed_now):
    remote = GeoPoint(21.4858, 39.1925)
    employees = tuple(
        replace(e, workplace_location=remote, workplace_radius_m=50) if e.employee_id == "E3" else e
        for e in roster.employees
    )
    store = InMemoryStore(employees=employees, departments=roster.departments)

    event = make_service(store).check_in("E3", position=remote, photo_ref="photo://1", now=fixed_now)

    assert event.status == AttendanceStatus.PRESENT
    assert event.distance_m == 0.0


def test_missing_position_is_location_unavailable(store, fixed_now):
    with pytest.raises(LocationUnavailableError):
        make_service(store).check_in("E2", position=None, photo_ref="photo://1", now=fixed_now)
    assert store.load_events() == ()


def test_missing_photo_is_rejected(store, fixed_now):
    with pytest.raises(ValidationError):
        make_service(store).check_in("E2", position=ON_SITE, photo_ref="", now=fixed_now)


def test_unknown_employee(store, fixed_now):
    with pytest.raises(UnknownEmployeeError):
        make_service(store).check_in("nobody", position=ON_SITE, photo_ref="photo://1", now=fixed_now)


def test_duplicate_check_in_is_not_persisted(store, fixed_now):
    service = make_service(store)
    service.check_in("E2", position=ON_SITE, photo_ref="photo://1", now=fixed_now)

    with pytest.raises(DuplicateEventError):
        service.check_in("E2", position=ON_SITE, photo_ref="photo://2", now=datetime(2026, 2, 2, 10, 0))

    assert len(store.load_events()) == 1


def test_check_out_requires_check_in(store, fixed_now):
    service = make_service(store)
    with pytest.raises(ValidationError):
        service.check_out("E2", position=ON_SITE, photo_ref="photo://1", now=fixed_now)

    service.check_in("E2", position=ON_SITE, photo_ref="photo://1", now=fixed_now)
    out = service.check_out("E2", position=ON_SITE, photo_ref="photo://2", now=datetime(2026, 2, 2, 16, 35))
    assert out.kind == EventKind.OUT
    assert out.status == AttendanceStatus.PRESENT


def test_strict_policy_without_any_site(store, fixed_now):
    service = make_service(
        store, company_site=None, classifier=AttendanceClassifier(policy=GeofencePolicy.STRICT)
    )
    event = service.check_in("E3", position=ON_SITE, photo_ref="photo://1", now=fixed_now)
    assert event.status == AttendanceStatus.OUT_OF_BOUNDS
    assert event.distance_m is None


def test_history_is_most_recent_first_and_limited(store, fixed_now):
    service = make_service(store)
    service.check_in("E2", position=ON_SITE, photo_ref="p", now=fixed_now)
    service.check_in("E3", position=ON_SITE, photo_ref="p", now=datetime(2026, 2, 2, 9, 0))
    service.check_out("E2", position=ON_SITE, photo_ref="p", now=datetime(2026, 2, 2, 17, 0))

    history = service.history(limit=2)
    assert [(e.employee_id, e.kind) for e in history] == [("E2", EventKind.OUT), ("E3", EventKind.IN)]

    assert [e.employee_id for e in service.history(department_id="D2")] == ["E3"]


def test_presence_overview_counts_absent_shift_workers(store, fixed_now):
    service = make_service(store)
    service.check_in("E3", position=FAR_AWAY, photo_ref="p", now=fixed_now)
    service.check_in("E4", position=ON_SITE, photo_ref="p", now=fixed_now)

    overview = service.presence_overview(date(2026, 2, 2))

    assert overview.checked_in == 2
    assert overview.absent_employee_ids == ("E2",)
    assert overview.by_status == {
        "PRESENT": 1,
        "OUT_OF_BOUNDS": 1,
        "LATE": 0,
        "ABSENT": 1,
    }


def test_empty_roster_overview():
    service = make_service(InMemoryStore())
    overview = service.presence_overview(date(2026, 2, 2))
    assert overview.checked_in == 0
    assert overview.absent_employee_ids == ()
    assert isinstance(service.ledger().snapshot(), tuple)


class InterleavingStore(InMemoryStore):
    """Holds every reader at ``load_events`` until all of them have read."""

    def __init__(self, parties, **kwargs):
        super().__init__(**kwargs)
        self._barrier = threading.Barrier(parties, timeout=5)
        self._waits_left = parties
        self._waits_lock = threading.Lock()

    def load_events(self):
        events = super().load_events()
        with self._waits_lock:
            wait = self._waits_left > 0
            self._waits_left -= 1
        if wait:
            self._barrier.wait()
        return events


def test_concurrent_check_ins_record_once(roster, fixed_now):
    store = InterleavingStore(2, employees=roster.employees, departments=roster.departments)
    service = make_service(store)
    outcomes = []

    def capture():
        try:
            service.check_in("E2", position=ON_SITE, photo_ref="p", now=fixed_now)
            outcomes.append("recorded")
        except DuplicateEventError:
            outcomes.append("duplicate")

    threads = [threading.Thread(target=capture) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes) == ["duplicate", "recorded"]
    assert len(store.load_events()) == 1


def test_overview_counts_overnight_check_in_for_shift_start_day(roster):
    night = ShiftWindow(start_time=time(22, 0), end_time=time(6, 0))
    employees = tuple(
        replace(e, shift=night, is_shift_required=True) if e.employee_id == "E3" else e for e in roster.employees
    )
    store = InMemoryStore(employees=employees, departments=roster.departments)
    service = make_service(store)

    service.check_in("E3", position=ON_SITE, photo_ref="p", now=datetime(2026, 2, 3, 0, 30))

    first_night = service.presence_overview(date(2026, 2, 2))
    assert "E3" not in first_night.absent_employee_ids
    assert first_night.by_status["LATE"] == 1

    next_night = service.presence_overview(date(2026, 2, 3))
    assert "E3" in next_night.absent_employee_ids
