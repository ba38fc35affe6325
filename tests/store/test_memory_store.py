import threading
from dataclasses import replace
from datetime import datetime, time

import pytest

from src.field_attendance.field_attendance.attendance.model import AttendanceEvent
from src.field_attendance.field_attendance.core.enums import AttendanceStatus, EventKind
from src.field_attendance.field_attendance.core.exceptions import ConcurrentModificationError, DuplicateEventError
from src.field_attendance.field_attendance.geo.model import GeoPoint
from src.field_attendance.field_attendance.roster.engine import RosterConsistencyEngine
from src.field_attendance.field_attendance.shifts.model import ShiftWindow
from src.field_attendance.field_attendance.store.memory import InMemoryStore


def test_save_returns_next_version(store):
    loaded = store.load_roster()
    saved = store.save_roster(replace(loaded, employees=loaded.employees[:2]), expected_version=0)

    assert saved.version == 1
    assert store.load_roster() == saved
    assert len(store.load_roster().employees) == 2


def test_concurrent_writers_one_wins(store):
    engine = RosterConsistencyEngine()
    snapshot = store.load_roster()
    outcomes = []

    def writer(employee_id):
        successor = engine.assign_head(snapshot, "D1", employee_id)
        try:
            store.save_roster(successor, expected_version=snapshot.version)
            outcomes.append(("ok", employee_id))
        except ConcurrentModificationError:
            outcomes.append(("conflict", employee_id))

    threads = [threading.Thread(target=writer, args=(i,)) for i in ("E1", "E2")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(kind for kind, _ in outcomes) == ["conflict", "ok"]
    winner = next(i for kind, i in outcomes if kind == "ok")
    assert store.load_roster().department("D1").head_id == winner
    assert store.load_roster().version == 1


def test_collections_start_empty():
    store = InMemoryStore()
    assert store.load_roster().employees == ()
    assert store.load_events() == ()
    assert store.load_reports() == ()
    assert store.load_messages() == ()
    assert store.load_announcements() == ()


def test_stale_version_rejected(store):
    with pytest.raises(ConcurrentModificationError):
        store.save_roster(store.load_roster(), expected_version=5)


def test_append_event_rejects_duplicate_in_same_shift():
    def event(event_id, at):
        return AttendanceEvent(
            event_id=event_id,
            employee_id="E1",
            kind=EventKind.IN,
            timestamp=at,
            photo_ref="p",
            position=GeoPoint(0, 0),
            status=AttendanceStatus.PRESENT,
        )

    store = InMemoryStore()
    night = ShiftWindow(start_time=time(22, 0), end_time=time(6, 0))
    store.append_event(event("a", datetime(2026, 2, 2, 22, 0)), shift=night)

    with pytest.raises(DuplicateEventError):
        store.append_event(event("b", datetime(2026, 2, 3, 2, 0)), shift=night)

    assert [e.event_id for e in store.load_events()] == ["a"]
