from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta

from .strategies.base import ClockInStrategy, ClockOutStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.on_time_strategy import OnTimeStrategy
from .strategies.shift_ended_strategy import ShiftEndedStrategy


@dataclass
class PunchStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules.

    Lateness is judged at minute resolution: a clock-in is late only when its
    minute is strictly after expected start + grace (07:00:59 is on time for a
    07:00 shift, 07:01 is late).
    """

    def for_clock_in(self, *, now: datetime, expected_start: time, grace_minutes: int) -> ClockInStrategy:
        punch_minute = now.replace(second=0, microsecond=0, tzinfo=None)
        deadline = datetime.combine(now.date(), expected_start) + timedelta(minutes=grace_minutes)
        if punch_minute <= deadline:
            return OnTimeStrategy()
        return LateStrategy()

    def for_clock_out(self, *, now: datetime) -> ClockOutStrategy:
        return ShiftEndedStrategy()
