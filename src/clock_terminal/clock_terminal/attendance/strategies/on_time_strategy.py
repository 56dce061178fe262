from __future__ import annotations

from datetime import datetime, time

from ...core.enums import PunchStatus
from .base import ClockInStrategy, StatusDecision


class OnTimeStrategy(ClockInStrategy):
    """Arrival at or before the expected start."""

    def decide_clock_in(self, *, now: datetime, expected_start: time) -> StatusDecision:
        return StatusDecision(status=PunchStatus.ON_TIME)
