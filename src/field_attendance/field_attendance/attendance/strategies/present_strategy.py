from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class PresentStrategy(AttendanceStrategy):
    """On site and on time (or a check-out)."""

    def decide(self, *, distance_m: Optional[float]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT, distance_m=distance_m)
