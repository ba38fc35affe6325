from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.constants import DEFAULT_LATE_GRACE_MINUTES
from ..core.enums import AttendanceStatus, EventKind, GeofencePolicy
from ..geo.distance import haversine_meters
from ..geo.model import GeoPoint, Site
from ..shifts.model import ShiftWindow
from .factory import AttendanceStrategyFactory
from .strategies.base import StatusDecision


class AttendanceClassifier:
    """Turns a captured position and timestamp into an attendance status.

    Order of checks: geofence first (``OUT_OF_BOUNDS`` wins over lateness),
    then lateness for check-ins against the shift start plus grace.
    When ``site`` is missing the configured ``GeofencePolicy`` decides:
    ``UNRESTRICTED`` skips the geofence, ``STRICT`` rejects the capture.

    The classifier never raises; a missing position is the caller's problem
    and is reported as ``LocationUnavailableError`` before we get here.
    """

    def __init__(
        self,
        *,
        policy: GeofencePolicy = GeofencePolicy.UNRESTRICTED,
        grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
    ):
        self._factory = strategy_factory or AttendanceStrategyFactory(policy=policy)
        self._grace_minutes = int(grace_minutes)

    @property
    def policy(self) -> GeofencePolicy:
        return self._factory.policy

    def assess(
        self,
        *,
        kind: EventKind,
        position: GeoPoint,
        site: Optional[Site],
        shift: Optional[ShiftWindow],
        timestamp: datetime,
    ) -> StatusDecision:
        distance_m = haversine_meters(position, site.location) if site else None
        strategy = self._factory.for_capture(
            kind=kind,
            now=timestamp,
            distance_m=distance_m,
            radius_m=site.radius_m if site else None,
            shift=shift,
            grace_minutes=self._grace_minutes,
        )
        return strategy.decide(distance_m=distance_m)

    def classify(
        self,
        *,
        kind: EventKind,
        position: GeoPoint,
        site: Optional[Site],
        shift: Optional[ShiftWindow],
        timestamp: datetime,
    ) -> AttendanceStatus:
        return self.assess(kind=kind, position=position, site=site, shift=shift, timestamp=timestamp).status
