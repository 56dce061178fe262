from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Mapping, Optional, Sequence

from ..common.validators import require_latitude, require_longitude
from ..core.exceptions import ValidationError
from .model import ShopLocation


class ShopRegistry:
    """Static branch configuration, looked up by branch id."""

    def __init__(self, shops: Iterable[ShopLocation]):
        self._shops = {s.shop_id: s for s in shops}

    @classmethod
    def from_settings(cls, rows: Sequence[Mapping]) -> "ShopRegistry":
        return cls(
            ShopLocation(
                shop_id=str(r["id"]),
                name=str(r.get("name") or r["id"]),
                latitude=float(r["lat"]),
                longitude=float(r["lng"]),
                radius_m=float(r["radius_m"]) if r.get("radius_m") is not None else None,
            )
            for r in rows
        )

    def get(self, shop_id: Optional[str]) -> Optional[ShopLocation]:
        if not shop_id:
            return None
        return self._shops.get(str(shop_id))

    def require(self, shop_id: Optional[str]) -> ShopLocation:
        shop = self.get(shop_id)
        if not shop:
            raise ValidationError(f"Unknown branch: {shop_id}")
        return shop

    def with_coordinates(self, shop_id: str, lat, lng) -> ShopLocation:
        """Branch as printed on a QR poster that carries its own coordinates."""
        shop = self.require(shop_id)
        return replace(shop, latitude=require_latitude(lat), longitude=require_longitude(lng))

    def list_all(self) -> Sequence[ShopLocation]:
        return list(self._shops.values())
