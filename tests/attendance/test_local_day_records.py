from datetime import date, time

from src.clock_terminal.clock_terminal.attendance.day_records import LocalDayRecords
from src.clock_terminal.clock_terminal.attendance.model import AttendancePunch
from src.clock_terminal.clock_terminal.core.enums import PunchStatus
from src.clock_terminal.clock_terminal.storage.local_store import LocalStore

MONDAY = date(2026, 10, 19)
TUESDAY = date(2026, 10, 20)


def test_remember_merges_punches_for_same_day(tmp_path):
    records = LocalDayRecords(LocalStore(tmp_path / "terminal.db"))

    records.remember(AttendancePunch("K-007", MONDAY, status=PunchStatus.ON_TIME, time_in=time(6, 58), shift="early"))
    merged = records.remember(
        AttendancePunch("K-007", MONDAY, status=PunchStatus.SHIFT_ENDED, time_out=time(17, 0), total_hours=10.03)
    )

    assert (merged.time_in, merged.time_out, merged.shift) == (time(6, 58), time(17, 0), "early")
    assert records.get("K-007", MONDAY) == merged
    assert records.get("A-001", MONDAY) is None


def test_rows_from_earlier_days_are_dropped(tmp_path):
    store = LocalStore(tmp_path / "terminal.db")
    records = LocalDayRecords(store)
    records.remember(AttendancePunch("K-007", MONDAY, time_in=time(6, 58)))

    records.remember(AttendancePunch("A-001", TUESDAY, time_in=time(7, 30)))

    assert records.get("K-007", MONDAY) is None
    assert LocalDayRecords(store).get("A-001", TUESDAY).time_in == time(7, 30)
