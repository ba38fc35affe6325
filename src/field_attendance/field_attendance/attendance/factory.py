from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..core.enums import EventKind, GeofencePolicy
from ..shifts.model import ShiftWindow
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.out_of_bounds_strategy import OutOfBoundsStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    policy: GeofencePolicy = GeofencePolicy.UNRESTRICTED

    def for_capture(
        self,
        *,
        kind: EventKind,
        now: datetime,
        distance_m: Optional[float],
        radius_m: Optional[float],
        shift: Optional[ShiftWindow],
        grace_minutes: int,
    ) -> AttendanceStrategy:
        if distance_m is None:
            if self.policy == GeofencePolicy.STRICT:
                return OutOfBoundsStrategy()
        elif radius_m is not None and distance_m > radius_m:
            return OutOfBoundsStrategy()

        if kind != EventKind.IN or not shift:
            return PresentStrategy()

        shift_start = shift.occurrence_start(now)
        if now <= shift_start + timedelta(minutes=grace_minutes):
            return PresentStrategy()
        return LateStrategy(minutes_late=int((now - shift_start).total_seconds() // 60))
