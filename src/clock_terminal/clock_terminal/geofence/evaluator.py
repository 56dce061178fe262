from __future__ import annotations

import logging
from math import atan2, cos, radians, sin, sqrt

from ..core.constants import DEFAULT_GEO_TIMEOUT_SECONDS, DEFAULT_GEOFENCE_RADIUS_M, EARTH_RADIUS_M
from ..core.exceptions import GeolocationError
from ..shops.model import ShopLocation
from .model import GeofenceResult, Position
from .provider import PositionProvider

logger = logging.getLogger(__name__)


def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in meters on a spherical earth."""
    phi1, phi2 = radians(lat1), radians(lat2)
    d_phi = radians(lat2 - lat1)
    d_lambda = radians(lng2 - lng1)

    a = sin(d_phi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(d_lambda / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_M * c


class GeofenceEvaluator:
    """Decide whether a device is inside a shop's allowed radius.

    Fails closed: when no position can be obtained the result is out of range.
    """

    def __init__(
        self,
        *,
        radius_m: float = DEFAULT_GEOFENCE_RADIUS_M,
        timeout_s: float = DEFAULT_GEO_TIMEOUT_SECONDS,
    ):
        self._radius_m = float(radius_m)
        self._timeout_s = float(timeout_s)

    def radius_for(self, shop: ShopLocation) -> float:
        return float(shop.radius_m) if shop.radius_m is not None else self._radius_m

    def evaluate(self, position: Position, shop: ShopLocation) -> GeofenceResult:
        radius = self.radius_for(shop)
        distance = round(haversine_m(position.latitude, position.longitude, shop.latitude, shop.longitude))
        return GeofenceResult(
            in_range=distance <= radius,
            radius_m=radius,
            distance_m=int(distance),
            position=position,
        )

    def check(self, provider: PositionProvider, shop: ShopLocation) -> GeofenceResult:
        try:
            position = provider.current_position(timeout_s=self._timeout_s)
        except GeolocationError as e:
            logger.warning("Geolocation failed for shop %s: %s", shop.shop_id, e)
            return GeofenceResult(in_range=False, radius_m=self.radius_for(shop), error=e.code)

        result = self.evaluate(position, shop)
        if not result.in_range:
            logger.info("Out of range for shop %s: %sm > %sm", shop.shop_id, result.distance_m, result.radius_m)
        return result

