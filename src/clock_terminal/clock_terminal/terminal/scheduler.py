from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None:
        raise NotImplementedError


class Scheduler(Protocol):
    def call_later(self, delay_s: float, fn: Callable[[], None]) -> TimerHandle:
        raise NotImplementedError

    def call_every(self, interval_s: float, fn: Callable[[], None]) -> TimerHandle:
        raise NotImplementedError


class _Recurring:
    def __init__(self, interval_s: float, fn: Callable[[], None]):
        self._interval = interval_s
        self._fn = fn
        self._timer: Optional[threading.Timer] = None
        self._cancelled = False
        self._lock = threading.Lock()

    def start(self) -> "_Recurring":
        with self._lock:
            if self._cancelled:
                return self
            self._timer = threading.Timer(self._interval, self._run)
            self._timer.daemon = True
            self._timer.start()
        return self

    def _run(self) -> None:
        try:
            self._fn()
        except Exception:
            logger.exception("Recurring task %r failed", self._fn)
        self.start()

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True
            if self._timer:
                self._timer.cancel()


class ThreadingScheduler(Scheduler):
    """Timers on daemon threads (threading.Timer)."""

    def call_later(self, delay_s: float, fn: Callable[[], None]) -> TimerHandle:
        timer = threading.Timer(delay_s, fn)
        timer.daemon = True
        timer.start()
        return timer

    def call_every(self, interval_s: float, fn: Callable[[], None]) -> TimerHandle:
        return _Recurring(interval_s, fn).start()
