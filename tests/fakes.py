from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from pathlib import Path
from types import SimpleNamespace
from typing import Callable, Optional

import config.testing as testing_settings

from src.clock_terminal.clock_terminal.attendance.model import AttendancePunch
from src.clock_terminal.clock_terminal.core.exceptions import RemoteStoreError
from src.clock_terminal.clock_terminal.staff.model import StaffCredential, normalize_employee_id

SHOP_315 = (-1.2841054429337717, 36.88731212229706)
FAR_AWAY = (-1.2641054429337717, 36.88731212229706)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class InMemoryStaffDirectory:
    def __init__(self, staff: list[StaffCredential]):
        self.staff = {normalize_employee_id(s.employee_id): s for s in staff}
        self.fail = False

    def lookup_staff(self, employee_id: str, pin: str) -> Optional[StaffCredential]:
        if self.fail:
            raise RemoteStoreError("staff lookup failed: connection refused")
        s = self.staff.get(normalize_employee_id(employee_id))
        if s and s.pin == pin:
            return s
        return None

    def list_staff(self) -> list[StaffCredential]:
        if self.fail:
            raise RemoteStoreError("staff list failed: connection refused")
        return list(self.staff.values())


class InMemoryAttendanceStore:
    """Attendance table keyed by (employee, date); upserts merge non-empty fields."""

    def __init__(self):
        self.rows: dict[tuple[str, date], AttendancePunch] = {}
        self.writes: list[AttendancePunch] = []
        self.fail = False
        self.fail_refs: set[str] = set()

    def upsert_attendance(self, punch: AttendancePunch) -> None:
        if self.fail or punch.ref_id in self.fail_refs:
            raise RemoteStoreError(f"attendance upsert failed for {punch.ref_id}")
        self.writes.append(punch)
        existing = self.rows.get(punch.key)
        self.rows[punch.key] = existing.merge(punch) if existing else punch

    def query_attendance(self, employee_id: str, work_date: date) -> Optional[AttendancePunch]:
        if self.fail:
            raise RemoteStoreError("attendance query failed")
        return self.rows.get((employee_id, work_date))

    def ping(self) -> bool:
        return not self.fail


@dataclass
class ManualTimer:
    delay_s: float
    fn: Callable[[], None]
    repeat: bool = False
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class ManualScheduler:
    timers: list[ManualTimer] = field(default_factory=list)

    def call_later(self, delay_s: float, fn: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(delay_s, fn)
        self.timers.append(timer)
        return timer

    def call_every(self, interval_s: float, fn: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(interval_s, fn, repeat=True)
        self.timers.append(timer)
        return timer

    def pending(self) -> list[ManualTimer]:
        return [t for t in self.timers if not t.cancelled]

    def fire_due(self) -> None:
        for timer in list(self.pending()):
            if not timer.repeat:
                timer.cancelled = True
            timer.fn()


class InlineExecutor:
    """Runs submitted work immediately on the calling thread."""

    def __init__(self):
        self.submitted = 0

    def submit(self, fn, *args, **kwargs) -> Future:
        self.submitted += 1
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


def make_settings(tmp_path: Path, **overrides) -> SimpleNamespace:
    values = {k: v for k, v in vars(testing_settings).items() if k.isupper()}
    values["LOCAL_STORE_PATH"] = str(tmp_path / "terminal.db")
    values["LOG_LEVEL"] = "WARNING"
    values.update(overrides)
    return SimpleNamespace(**values)


def demo_staff() -> list[StaffCredential]:
    return [
        StaffCredential(employee_id="K-007", name="Kamau Njoroge", pin="0007", home_shop="315"),
        StaffCredential(employee_id="A-001", name="Achieng Otieno", pin="1111", home_shop="Stage"),
    ]
