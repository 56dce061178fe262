from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ShopLocation:
    """A branch with a circular geofence around its position."""

    shop_id: str
    name: str
    latitude: float
    longitude: float
    radius_m: Optional[float] = None
