from __future__ import annotations

import importlib
import logging
from itertools import islice
from typing import Optional, Protocol, Sequence

from ..attendance.ledger import AttendanceLedger
from ..attendance.model import AttendanceEvent
from ..core.constants import DEFAULT_SUMMARY_EVENT_LIMIT
from ..core.exceptions import SummaryUnavailableError, ValidationError

logger = logging.getLogger(__name__)


class SummaryClient(Protocol):
    """External text-summary service. No contract on the returned text."""

    def summarize(self, events: Sequence[AttendanceEvent]) -> str:
        raise NotImplementedError


def load_summary_client(path: Optional[str]) -> Optional[SummaryClient]:
    """Build the client named by ``"package.module:factory"``; empty means none."""
    if not path:
        return None
    module_name, _, attr = path.partition(":")
    if not module_name or not attr:
        raise ValueError(f"SUMMARY_CLIENT must look like package.module:factory, got {path!r}")
    factory = getattr(importlib.import_module(module_name), attr)
    logger.info("summary client: %s", path)
    return factory()


class AttendanceSummaryService:
    def __init__(self, client: Optional[SummaryClient] = None, *, limit: int = DEFAULT_SUMMARY_EVENT_LIMIT):
        self._client = client
        self._limit = int(limit)

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def recent_slice(self, ledger: AttendanceLedger, limit: Optional[int] = None) -> list[AttendanceEvent]:
        limit = self._limit if limit is None else int(limit)
        if limit < 0:
            raise ValidationError("Limit must not be negative")
        return list(islice(ledger.query(), limit))

    def summarize_recent(self, ledger: AttendanceLedger, limit: Optional[int] = None) -> str:
        if self._client is None:
            raise SummaryUnavailableError("No summary service configured")

        events = self.recent_slice(ledger, limit)
        try:
            return self._client.summarize(events)
        except Exception as exc:
            logger.warning("summary service failed: %s", exc)
            raise SummaryUnavailableError("Summary service failed") from exc
