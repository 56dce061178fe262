from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Protocol

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_PRESENCE_TTL_SECONDS
from .model import PresenceEntry

logger = logging.getLogger(__name__)

# Called with the full member map after every membership change.
PresenceListener = Callable[[Dict[str, PresenceEntry]], None]


class PresenceChannel(Protocol):
    """Shared "currently active staff" channel with membership-based liveness."""

    def track(self, entry: PresenceEntry) -> None:
        raise NotImplementedError

    def untrack(self, key: str) -> None:
        raise NotImplementedError

    def subscribe(self, listener: PresenceListener) -> Callable[[], None]:
        raise NotImplementedError

    def members(self) -> Dict[str, PresenceEntry]:
        raise NotImplementedError


class InMemoryPresenceChannel(PresenceChannel):
    """Process-local presence channel.

    A member that has not re-tracked within `ttl_s` is dropped on the next
    sweep, the same way a closed tab or sleeping device leaves a realtime
    channel without an explicit unpublish.
    """

    def __init__(self, *, ttl_s: float = DEFAULT_PRESENCE_TTL_SECONDS, clock: Callable[[], datetime] = now_local):
        self._ttl = timedelta(seconds=ttl_s)
        self._clock = clock
        self._members: Dict[str, PresenceEntry] = {}
        self._seen: Dict[str, datetime] = {}
        self._listeners: List[PresenceListener] = []
        self._lock = threading.Lock()

    def track(self, entry: PresenceEntry) -> None:
        with self._lock:
            self._members[entry.key] = entry
            self._seen[entry.key] = self._clock()
        self._notify()

    def untrack(self, key: str) -> None:
        with self._lock:
            removed = self._members.pop(key, None)
            self._seen.pop(key, None)
        if removed:
            self._notify()

    def sweep(self, now: Optional[datetime] = None) -> List[str]:
        now = now or self._clock()
        with self._lock:
            stale = [k for k, seen in self._seen.items() if now - seen > self._ttl]
            for key in stale:
                self._members.pop(key, None)
                self._seen.pop(key, None)
        if stale:
            logger.debug("Presence expired: %s", ", ".join(stale))
            self._notify()
        return stale

    def subscribe(self, listener: PresenceListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)
            snapshot = dict(self._members)
        listener(snapshot)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def members(self) -> Dict[str, PresenceEntry]:
        with self._lock:
            return dict(self._members)

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
            snapshot = dict(self._members)
        for listener in listeners:
            listener(snapshot)
