from __future__ import annotations

from dataclasses import dataclass

from ..common.validators import require_latitude, require_longitude
from ..core.constants import DEFAULT_SITE_RADIUS_METERS


@dataclass(frozen=True)
class GeoPoint:
    """A (latitude, longitude) pair in decimal degrees."""

    lat: float
    lng: float

    @classmethod
    def parse(cls, lat, lng) -> "GeoPoint":
        return cls(lat=require_latitude(lat), lng=require_longitude(lng))

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class Site:
    """Reference work site: the centre and radius of a geofence."""

    location: GeoPoint
    radius_m: float = DEFAULT_SITE_RADIUS_METERS
    label: str = ""
