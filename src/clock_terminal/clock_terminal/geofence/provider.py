from __future__ import annotations

import threading
from datetime import datetime, timedelta
from typing import Callable, Optional, Protocol

from ..common.datetime_utils import now_local
from ..core.enums import GeoErrorCode
from ..core.exceptions import GeolocationError
from .model import Position


class PositionProvider(Protocol):
    def current_position(self, *, timeout_s: float) -> Position:
        """Return the device position or raise GeolocationError."""

        raise NotImplementedError


class ReportedPositionProvider(PositionProvider):
    """Position pushed by the kiosk browser (navigator.geolocation).

    The browser reports either a reading or an error code. A reading older than
    the request timeout is treated as a timeout.
    """

    def __init__(self, clock: Callable[[], datetime] = now_local):
        self._clock = clock
        self._lock = threading.Lock()
        self._position: Optional[Position] = None
        self._error: Optional[GeoErrorCode] = None

    def report(self, latitude: float, longitude: float, accuracy_m: Optional[float] = None) -> Position:
        position = Position(latitude, longitude, accuracy_m, captured_at=self._clock())
        with self._lock:
            self._position = position
            self._error = None
        return position

    def report_error(self, code: GeoErrorCode) -> None:
        with self._lock:
            self._position = None
            self._error = code

    def clear(self) -> None:
        with self._lock:
            self._position = None
            self._error = None

    def current_position(self, *, timeout_s: float) -> Position:
        with self._lock:
            position, error = self._position, self._error
        if error is not None:
            raise GeolocationError(error)
        if position is None:
            raise GeolocationError(GeoErrorCode.UNAVAILABLE, "no position reported")
        if position.captured_at and self._clock() - position.captured_at > timedelta(seconds=timeout_s):
            raise GeolocationError(GeoErrorCode.TIMEOUT, "position reading is stale")
        return position
