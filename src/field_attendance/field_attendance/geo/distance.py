from __future__ import annotations

import math

from ..core.constants import EARTH_RADIUS_METERS
from .model import GeoPoint


def haversine_meters(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points on a spherical earth, in meters."""
    if a == b:
        return 0.0

    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    d_lat = lat2 - lat1
    d_lng = math.radians(b.lng - a.lng)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    # Rounding can push h slightly outside [0, 1] near antipodes.
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(h))
