from datetime import datetime, time

import pytest

from src.field_attendance.field_attendance.attendance.classifier import AttendanceClassifier
from src.field_attendance.field_attendance.core.enums import AttendanceStatus, EventKind, GeofencePolicy
from src.field_attendance.field_attendance.geo.model import GeoPoint, Site
from src.field_attendance.field_attendance.shifts.model import ShiftWindow

SITE = Site(location=GeoPoint(0, 0), radius_m=100)
SHIFT = ShiftWindow(start_time=time(8, 0), end_time=time(16, 0))
ON_TIME = datetime(2026, 1, 5, 7, 55)


def classify(classifier, *, position, kind=EventKind.IN, site=SITE, shift=SHIFT, timestamp=ON_TIME):
    return classifier.classify(kind=kind, position=position, site=site, shift=shift, timestamp=timestamp)


def test_inside_radius_is_present():
    assert classify(AttendanceClassifier(), position=GeoPoint(0, 0.0005)) == AttendanceStatus.PRESENT


def test_outside_radius_is_out_of_bounds():
    assert classify(AttendanceClassifier(), position=GeoPoint(0, 0.01)) == AttendanceStatus.OUT_OF_BOUNDS


def test_out_of_bounds_wins_over_late():
    late = datetime(2026, 1, 5, 9, 0)
    status = classify(AttendanceClassifier(), position=GeoPoint(0, 0.01), timestamp=late)
    assert status == AttendanceStatus.OUT_OF_BOUNDS


@pytest.mark.parametrize(
    "moment, expected",
    [
        (datetime(2026, 1, 5, 8, 5, 0), AttendanceStatus.PRESENT),
        (datetime(2026, 1, 5, 8, 5, 1), AttendanceStatus.LATE),
    ],
)
def test_grace_period_boundary(moment, expected):
    classifier = AttendanceClassifier(grace_minutes=5)
    assert classify(classifier, position=GeoPoint(0, 0), timestamp=moment) == expected


def test_late_only_applies_to_check_in():
    late = datetime(2026, 1, 5, 17, 0)
    status = classify(AttendanceClassifier(), position=GeoPoint(0, 0), kind=EventKind.OUT, timestamp=late)
    assert status == AttendanceStatus.PRESENT


def test_no_shift_never_late():
    status = classify(AttendanceClassifier(), position=GeoPoint(0, 0), shift=None, timestamp=datetime(2026, 1, 5, 23, 0))
    assert status == AttendanceStatus.PRESENT


def test_missing_site_unrestricted_policy_skips_geofence():
    classifier = AttendanceClassifier(policy=GeofencePolicy.UNRESTRICTED)
    assert classify(classifier, position=GeoPoint(40, 40), site=None) == AttendanceStatus.PRESENT


def test_missing_site_unrestricted_policy_still_reports_late():
    classifier = AttendanceClassifier(policy=GeofencePolicy.UNRESTRICTED)
    status = classify(classifier, position=GeoPoint(40, 40), site=None, timestamp=datetime(2026, 1, 5, 9, 0))
    assert status == AttendanceStatus.LATE


def test_missing_site_strict_policy_is_out_of_bounds():
    classifier = AttendanceClassifier(policy=GeofencePolicy.STRICT)
    assert classify(classifier, position=GeoPoint(0, 0), site=None) == AttendanceStatus.OUT_OF_BOUNDS


def test_assess_reports_distance():
    decision = AttendanceClassifier().assess(
        kind=EventKind.IN, position=GeoPoint(0, 0.0005), site=SITE, shift=SHIFT, timestamp=ON_TIME
    )
    assert decision.distance_m == pytest.approx(55.6, abs=0.5)
