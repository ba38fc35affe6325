from datetime import date, datetime, time

import pytest

from src.field_attendance.field_attendance.attendance.ledger import AttendanceLedger
from src.field_attendance.field_attendance.attendance.model import AttendanceEvent
from src.field_attendance.field_attendance.core.enums import AttendanceStatus, ErrorKind, EventKind
from src.field_attendance.field_attendance.core.exceptions import DuplicateEventError
from src.field_attendance.field_attendance.geo.model import GeoPoint
from src.field_attendance.field_attendance.shifts.model import ShiftWindow

_seq = iter(range(1, 10_000))


def make_event(employee_id="E1", kind=EventKind.IN, at=datetime(2026, 2, 2, 8, 0), department_id="D1"):
    return AttendanceEvent(
        event_id=f"ev{next(_seq)}",
        employee_id=employee_id,
        kind=kind,
        timestamp=at,
        photo_ref="photo://x",
        position=GeoPoint(0, 0),
        status=AttendanceStatus.PRESENT,
        department_id=department_id,
    )


def test_second_check_in_in_same_shift_is_rejected():
    ledger = AttendanceLedger()
    shift = ShiftWindow(start_time=time(8, 0), end_time=time(16, 0))
    ledger.record(make_event(at=datetime(2026, 2, 2, 8, 0)), shift=shift)

    with pytest.raises(DuplicateEventError) as exc:
        ledger.record(make_event(at=datetime(2026, 2, 2, 12, 0)), shift=shift)

    assert exc.value.kind == ErrorKind.DUPLICATE_EVENT
    assert len(ledger) == 1


def test_check_in_and_check_out_are_distinct_kinds():
    ledger = AttendanceLedger()
    ledger.record(make_event(kind=EventKind.IN))
    ledger.record(make_event(kind=EventKind.OUT, at=datetime(2026, 2, 2, 16, 0)))
    assert len(ledger) == 2


def test_next_day_check_in_is_allowed():
    ledger = AttendanceLedger()
    ledger.record(make_event(at=datetime(2026, 2, 2, 8, 0)))
    ledger.record(make_event(at=datetime(2026, 2, 3, 8, 0)))
    assert len(ledger) == 2


def test_overnight_shift_spans_midnight():
    shift = ShiftWindow(start_time=time(22, 0), end_time=time(6, 0))
    ledger = AttendanceLedger()
    ledger.record(make_event(at=datetime(2026, 2, 2, 22, 5)), shift=shift)

    with pytest.raises(DuplicateEventError):
        ledger.record(make_event(at=datetime(2026, 2, 3, 1, 0)), shift=shift)

    ledger.record(make_event(at=datetime(2026, 2, 3, 21, 55)), shift=shift)
    assert len(ledger) == 2


def test_other_employee_is_independent():
    ledger = AttendanceLedger()
    ledger.record(make_event(employee_id="E1"))
    ledger.record(make_event(employee_id="E2"))
    assert len(ledger) == 2


def test_query_filters_and_orders_most_recent_first():
    ledger = AttendanceLedger(
        [
            make_event(employee_id="E1", at=datetime(2026, 2, 1, 8, 0)),
            make_event(employee_id="E2", at=datetime(2026, 2, 2, 8, 0), department_id="D2"),
            make_event(employee_id="E1", at=datetime(2026, 2, 3, 8, 0)),
            make_event(employee_id="E1", kind=EventKind.OUT, at=datetime(2026, 2, 3, 16, 0)),
        ]
    )

    mine = list(ledger.query(employee_id="E1"))
    assert [e.timestamp for e in mine] == [
        datetime(2026, 2, 3, 16, 0),
        datetime(2026, 2, 3, 8, 0),
        datetime(2026, 2, 1, 8, 0),
    ]

    ranged = list(ledger.query(date_range=(date(2026, 2, 2), date(2026, 2, 3))))
    assert len(ranged) == 3

    d2 = list(ledger.query(department_id="D2"))
    assert [e.employee_id for e in d2] == ["E2"]

    assert list(ledger.query(employee_id="E2", department_id="D1")) == []


def test_query_is_lazy_and_restartable():
    ledger = AttendanceLedger([make_event()])
    result = ledger.query()
    assert iter(result) is result

    first = list(ledger.query())
    second = list(ledger.query())
    assert first == second
