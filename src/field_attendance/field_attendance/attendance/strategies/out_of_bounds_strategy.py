from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class OutOfBoundsStrategy(AttendanceStrategy):
    """Captured position outside the site geofence (or no site under STRICT policy)."""

    def decide(self, *, distance_m: Optional[float]) -> StatusDecision:
        note = None if distance_m is not None else "no reference site"
        return StatusDecision(status=AttendanceStatus.OUT_OF_BOUNDS, distance_m=distance_m, note=note)
