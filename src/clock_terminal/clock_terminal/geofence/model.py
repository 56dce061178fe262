from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import GeoErrorCode


@dataclass(frozen=True)
class Position:
    latitude: float
    longitude: float
    accuracy_m: Optional[float] = None
    captured_at: Optional[datetime] = None


@dataclass(frozen=True)
class GeofenceResult:
    """Outcome of one geofence check. `distance_m` is None when no position was obtained."""

    in_range: bool
    radius_m: float
    distance_m: Optional[int] = None
    position: Optional[Position] = None
    error: Optional[GeoErrorCode] = None

    def to_dict(self) -> dict:
        return {
            "in_range": self.in_range,
            "radius_m": self.radius_m,
            "distance_m": self.distance_m,
            "error": self.error.value if self.error else None,
        }
