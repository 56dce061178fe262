from __future__ import annotations

from datetime import datetime

from ...core.enums import PunchStatus
from .base import ClockOutStrategy, StatusDecision


class ShiftEndedStrategy(ClockOutStrategy):
    """Clock-out. Lateness only applies to arrival, so the label is fixed."""

    def decide_clock_out(self, *, now: datetime) -> StatusDecision:
        return StatusDecision(status=PunchStatus.SHIFT_ENDED)
