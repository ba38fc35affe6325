from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in."""

    def __init__(self, minutes_late: int = 0):
        self.minutes_late = int(minutes_late)

    def decide(self, *, distance_m: Optional[float]) -> StatusDecision:
        note = f"{self.minutes_late} min after shift start" if self.minutes_late else None
        return StatusDecision(status=AttendanceStatus.LATE, distance_m=distance_m, note=note)
