from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_empty(value: str | None, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_coordinate(value, field_name: str, *, limit: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number") from None
    if not -limit <= number <= limit:
        raise ValidationError(f"{field_name} out of range")
    return number


def require_latitude(value) -> float:
    return require_coordinate(value, "Latitude", limit=90.0)


def require_longitude(value) -> float:
    return require_coordinate(value, "Longitude", limit=180.0)
