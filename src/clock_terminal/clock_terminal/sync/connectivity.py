from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

Listener = Callable[[bool], None]


class ConnectivityMonitor:
    """Tracks online/offline and notifies listeners on every transition.

    State comes from browser online/offline events (`set_online`) or from
    the periodic probe (`poll`), whichever reports first.
    """

    def __init__(self, *, online: bool = True, probe: Optional[Callable[[], bool]] = None):
        self._online = bool(online)
        self._probe = probe
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()

    @property
    def online(self) -> bool:
        return self._online

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def set_online(self, online: bool) -> bool:
        """Record the new state; returns True when it changed."""
        with self._lock:
            changed = self._online != bool(online)
            self._online = bool(online)
        if changed:
            logger.info("Connectivity changed: %s", "online" if online else "offline")
            for listener in list(self._listeners):
                listener(bool(online))
        return changed

    def poll(self) -> bool:
        if self._probe is None:
            return self._online
        try:
            online = bool(self._probe())
        except Exception as e:
            logger.warning("Connectivity probe failed: %s", e)
            online = False
        self.set_online(online)
        return online
