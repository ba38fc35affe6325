from __future__ import annotations

from typing import Protocol, Sequence

from .model import Report


class ReportRepository(Protocol):
    def load_reports(self) -> Sequence[Report]:
        raise NotImplementedError

    def append_report(self, report: Report) -> None:
        raise NotImplementedError
