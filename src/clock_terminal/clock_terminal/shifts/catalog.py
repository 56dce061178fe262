from __future__ import annotations

from datetime import date, time
from typing import Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import js_weekday, parse_clock_time
from ..core.constants import WEEKLY_SHIFT_DAY_INDEX
from ..core.exceptions import ValidationError
from .model import Shift


class ShiftCatalog:
    """Shift labels and their expected start, plus the weekly special day.

    On the weekly day (Sunday by default) every shift expects arrival by the
    weekly start, whatever label was selected.
    """

    def __init__(
        self,
        shifts: Iterable[Shift],
        *,
        weekly_start: Optional[time] = time(11, 0),
        weekly_day_index: int = WEEKLY_SHIFT_DAY_INDEX,
    ):
        self._shifts = {s.label: s for s in shifts}
        self._weekly_start = weekly_start
        self._weekly_day_index = int(weekly_day_index)

    @classmethod
    def from_settings(cls, starts: Mapping[str, str], *, weekly_start: Optional[str] = "11:00") -> "ShiftCatalog":
        return cls(
            (Shift(label=label, start_time=parse_clock_time(value)) for label, value in starts.items()),
            weekly_start=parse_clock_time(weekly_start) if weekly_start else None,
        )

    def list_all(self) -> Sequence[Shift]:
        return list(self._shifts.values())

    def get(self, label: str) -> Shift:
        shift = self._shifts.get(label)
        if not shift:
            raise ValidationError(f"Unknown shift: {label}")
        return shift

    def is_weekly_day(self, day: date) -> bool:
        return self._weekly_start is not None and js_weekday(day) == self._weekly_day_index

    def expected_start(self, label: str, day: date) -> time:
        shift = self.get(label)
        if self.is_weekly_day(day):
            return self._weekly_start
        return shift.start_time
