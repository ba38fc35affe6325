from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_latitude(value: float) -> float:
    value = float(value)
    if not -90.0 <= value <= 90.0:
        raise ValidationError(f"Latitude out of range: {value}")
    return value


def require_longitude(value: float) -> float:
    value = float(value)
    if not -180.0 <= value <= 180.0:
        raise ValidationError(f"Longitude out of range: {value}")
    return value
