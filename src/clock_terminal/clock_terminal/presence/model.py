from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PresenceEntry:
    """Live position of an active staff session. Never persisted."""

    key: str
    name: str
    latitude: float
    longitude: float
    timestamp: datetime

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "name": self.name,
            "lat": self.latitude,
            "lng": self.longitude,
            "timestamp": self.timestamp.isoformat(),
        }
