from __future__ import annotations

from dataclasses import dataclass
from datetime import time


@dataclass(frozen=True)
class Shift:
    """A selectable shift: label shown on the terminal and expected arrival time."""

    label: str
    start_time: time

    def to_dict(self) -> dict:
        return {"label": self.label, "start": self.start_time.strftime("%H:%M")}
