from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional

from ..common.datetime_utils import parse_hhmm
from ..geo.model import GeoPoint
from ..shifts.model import ShiftWindow
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection, one transaction: commit on success, rollback on error."""
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def column_time(value: Any) -> Optional[time]:
    """A TIME column as ``datetime.time``.

    The connector hands TIME back as ``timedelta`` (seconds since midnight);
    older rows may hold an ``HH:MM[:SS]`` string.
    """
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return time(seconds // 3600, (seconds % 3600) // 60, seconds % 60)
    if isinstance(value, str):
        return parse_hhmm(value[:5])
    raise TypeError(f"Unsupported TIME value: {value!r}")


def column_point(row: Dict[str, Any], lat_key: str, lng_key: str) -> Optional[GeoPoint]:
    lat, lng = optional_float(row.get(lat_key)), optional_float(row.get(lng_key))
    if lat is None or lng is None:
        return None
    return GeoPoint(lat=lat, lng=lng)


def column_shift(row: Dict[str, Any]) -> Optional[ShiftWindow]:
    start, end = column_time(row.get("shift_start")), column_time(row.get("shift_end"))
    if start is None or end is None:
        return None
    return ShiftWindow(start_time=start, end_time=end)
