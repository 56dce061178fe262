from __future__ import annotations

import threading
from datetime import datetime
from typing import Callable, Dict, List, Optional

from ..common.datetime_utils import now_local
from ..geofence.model import Position
from ..staff.model import StaffMember
from .channel import PresenceChannel
from .model import PresenceEntry


class PresenceBroadcaster:
    """Publishes the active session's staff position on the presence channel."""

    def __init__(self, channel: PresenceChannel, *, clock: Callable[[], datetime] = now_local):
        self._channel = channel
        self._clock = clock
        self._staff: Optional[StaffMember] = None

    @property
    def active(self) -> bool:
        return self._staff is not None

    def start(self, staff: StaffMember) -> None:
        if self._staff and self._staff.employee_id != staff.employee_id:
            self.stop()
        self._staff = staff

    def publish(self, position: Optional[Position]) -> Optional[PresenceEntry]:
        if self._staff is None or position is None:
            return None
        entry = PresenceEntry(
            key=self._staff.employee_id,
            name=self._staff.name,
            latitude=position.latitude,
            longitude=position.longitude,
            timestamp=position.captured_at or self._clock(),
        )
        self._channel.track(entry)
        return entry

    def stop(self) -> None:
        if self._staff is not None:
            self._channel.untrack(self._staff.employee_id)
            self._staff = None


class PresenceRoster:
    """Manager-side consumer: live roster keyed by publisher identity."""

    def __init__(self, channel: PresenceChannel):
        self._lock = threading.Lock()
        self._entries: Dict[str, PresenceEntry] = {}
        self._unsubscribe = channel.subscribe(self._on_update)

    def _on_update(self, members: Dict[str, PresenceEntry]) -> None:
        with self._lock:
            self._entries = dict(members)

    def entries(self) -> List[PresenceEntry]:
        with self._lock:
            return sorted(self._entries.values(), key=lambda e: e.name)

    def close(self) -> None:
        self._unsubscribe()
