from __future__ import annotations

from datetime import datetime, time

from ...core.enums import PunchStatus
from .base import ClockInStrategy, StatusDecision


class LateStrategy(ClockInStrategy):
    """Late clock-in."""

    def decide_clock_in(self, *, now: datetime, expected_start: time) -> StatusDecision:
        return StatusDecision(status=PunchStatus.LATE, note=f"expected by {expected_start.strftime('%H:%M')}")
