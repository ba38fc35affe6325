import sys
import types
from datetime import datetime, timedelta

import pytest

from src.field_attendance.field_attendance.attendance.ledger import AttendanceLedger
from src.field_attendance.field_attendance.attendance.model import AttendanceEvent
from src.field_attendance.field_attendance.core.enums import AttendanceStatus, EventKind
from src.field_attendance.field_attendance.core.exceptions import SummaryUnavailableError, ValidationError
from src.field_attendance.field_attendance.geo.model import GeoPoint
from src.field_attendance.field_attendance.insights.summary import AttendanceSummaryService, load_summary_client
from src.field_attendance.field_attendance.main import container_from


class RecordingClient:
    def __init__(self):
        self.seen = None

    def summarize(self, events):
        self.seen = list(events)
        return f"{len(self.seen)} events"


class BrokenClient:
    def summarize(self, events):
        raise RuntimeError("upstream timeout")


@pytest.fixture
def ledger():
    start = datetime(2026, 2, 1, 8, 0)
    return AttendanceLedger(
        AttendanceEvent(
            event_id=f"ev{i}",
            employee_id=f"E{i}",
            kind=EventKind.IN,
            timestamp=start + timedelta(minutes=i),
            photo_ref="p",
            position=GeoPoint(0, 0),
            status=AttendanceStatus.PRESENT,
        )
        for i in range(10)
    )


def test_summary_uses_most_recent_slice(ledger):
    client = RecordingClient()
    service = AttendanceSummaryService(client, limit=3)

    assert service.summarize_recent(ledger) == "3 events"
    assert [e.event_id for e in client.seen] == ["ev9", "ev8", "ev7"]


def test_summary_without_client(ledger):
    service = AttendanceSummaryService()
    assert not service.enabled
    with pytest.raises(SummaryUnavailableError):
        service.summarize_recent(ledger)


def test_client_failure_is_wrapped(ledger):
    with pytest.raises(SummaryUnavailableError) as exc:
        AttendanceSummaryService(BrokenClient()).summarize_recent(ledger)
    assert isinstance(exc.value.__cause__, RuntimeError)


def test_zero_limit_means_no_events(ledger):
    client = RecordingClient()
    assert AttendanceSummaryService(client).summarize_recent(ledger, limit=0) == "0 events"
    assert client.seen == []

    with pytest.raises(ValidationError):
        AttendanceSummaryService(client).recent_slice(ledger, limit=-1)


def test_default_limit_applies_when_not_given(ledger):
    assert len(AttendanceSummaryService(RecordingClient(), limit=4).recent_slice(ledger)) == 4


@pytest.fixture
def client_module(monkeypatch):
    module = types.ModuleType("fake_summary_backend")
    module.make_client = RecordingClient
    monkeypatch.setitem(sys.modules, "fake_summary_backend", module)
    return module


def test_load_summary_client(client_module):
    assert load_summary_client(None) is None
    assert load_summary_client("") is None
    assert isinstance(load_summary_client("fake_summary_backend:make_client"), RecordingClient)

    with pytest.raises(ValueError):
        load_summary_client("fake_summary_backend")


def test_settings_enable_summary_endpoint(client_module):
    settings = types.SimpleNamespace(STORAGE="memory", SUMMARY_CLIENT="fake_summary_backend:make_client")
    assert container_from(settings).summary_service.enabled

    settings.SUMMARY_CLIENT = None
    assert not container_from(settings).summary_service.enabled
