from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from ..common.datetime_utils import parse_hhmm


@dataclass(frozen=True)
class ShiftWindow:
    """The configured shift start/end time-of-day.

    A shift whose end is not after its start runs overnight into the next day.
    """

    start_time: time
    end_time: time

    @classmethod
    def parse(cls, start: str, end: str) -> "ShiftWindow":
        return cls(start_time=parse_hhmm(start), end_time=parse_hhmm(end))

    @property
    def is_overnight(self) -> bool:
        return self.end_time <= self.start_time

    def start_on(self, work_date: date) -> datetime:
        return datetime.combine(work_date, self.start_time)

    def end_on(self, work_date: date) -> datetime:
        end = datetime.combine(work_date, self.end_time)
        if self.is_overnight:
            end += timedelta(days=1)
        return end

    def work_date_for(self, moment: datetime) -> date:
        """The date the shift occurrence covering ``moment`` started on.

        For overnight shifts an early-morning moment before the shift end
        belongs to the previous day's occurrence.
        """
        if self.is_overnight and moment.time() < self.end_time:
            return moment.date() - timedelta(days=1)
        return moment.date()

    def occurrence_start(self, moment: datetime) -> datetime:
        return self.start_on(self.work_date_for(moment))

    def format(self) -> str:
        return f"{self.start_time.strftime('%H:%M')} - {self.end_time.strftime('%H:%M')}"
