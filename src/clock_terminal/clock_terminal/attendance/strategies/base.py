from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional

from ...core.enums import PunchStatus


@dataclass(frozen=True)
class StatusDecision:
    status: PunchStatus
    note: Optional[str] = None


class ClockInStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an arrival status."""

    @abstractmethod
    def decide_clock_in(self, *, now: datetime, expected_start: time) -> StatusDecision:
        raise NotImplementedError


class ClockOutStrategy(ABC):
    @abstractmethod
    def decide_clock_out(self, *, now: datetime) -> StatusDecision:
        raise NotImplementedError
