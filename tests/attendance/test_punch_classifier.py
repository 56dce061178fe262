from __future__ import annotations

from datetime import date, datetime, time

import pytest

from src.clock_terminal.clock_terminal.attendance.classifier import PunchClassifier, hours_between
from src.clock_terminal.clock_terminal.attendance.model import AttendancePunch
from src.clock_terminal.clock_terminal.core.enums import PunchStatus
from src.clock_terminal.clock_terminal.core.exceptions import ValidationError
from src.clock_terminal.clock_terminal.geofence.model import Position
from src.clock_terminal.clock_terminal.shifts.catalog import ShiftCatalog
from src.clock_terminal.clock_terminal.shops.model import ShopLocation
from src.clock_terminal.clock_terminal.staff.model import StaffMember

STAFF = StaffMember(employee_id="K-007", name="Kamau Njoroge", home_shop="315")
SHOP = ShopLocation(shop_id="315", name="Shop 315", latitude=-1.28, longitude=36.88)
MONDAY = date(2026, 10, 19)
SUNDAY = date(2026, 10, 18)


def _classifier(grace: int = 0) -> PunchClassifier:
    catalog = ShiftCatalog.from_settings({"early": "07:00", "standard": "08:00"}, weekly_start="11:00")
    return PunchClassifier(catalog, grace_minutes=grace)


def _clock_in(now: datetime, shift: str = "early", existing=None) -> AttendancePunch:
    return _classifier().clock_in(staff=STAFF, shop=SHOP, shift_label=shift, now=now, existing=existing)


def test_clock_in_four_minutes_after_early_start_is_late():
    punch = _clock_in(datetime(2026, 10, 19, 7, 4))

    assert punch.status == PunchStatus.LATE
    assert punch.time_in == time(7, 4)
    assert punch.time_out is None
    assert punch.shift == "early"
    assert punch.shop == "Shop 315"
    assert punch.is_paid is False


def test_clock_in_before_early_start_is_on_time():
    punch = _clock_in(datetime(2026, 10, 19, 6, 58))

    assert punch.status == PunchStatus.ON_TIME
    assert punch.key == ("K-007", MONDAY)


def test_standard_shift_uses_its_own_start():
    assert _clock_in(datetime(2026, 10, 19, 7, 45), shift="standard").status == PunchStatus.ON_TIME
    assert _clock_in(datetime(2026, 10, 19, 8, 1), shift="standard").status == PunchStatus.LATE


def test_sunday_uses_weekly_start_for_every_shift():
    assert _clock_in(datetime(2026, 10, 18, 10, 59), shift="early").status == PunchStatus.ON_TIME
    assert _clock_in(datetime(2026, 10, 18, 11, 0, 30), shift="standard").status == PunchStatus.ON_TIME
    assert _clock_in(datetime(2026, 10, 18, 11, 1), shift="early").status == PunchStatus.LATE


def test_clock_in_records_position():
    punch = _classifier().clock_in(
        staff=STAFF,
        shop=SHOP,
        shift_label="early",
        now=datetime(2026, 10, 19, 6, 58),
        existing=None,
        position=Position(-1.2841, 36.8873),
    )

    assert (punch.latitude, punch.longitude) == (-1.2841, 36.8873)


def test_unknown_shift_is_rejected():
    with pytest.raises(ValidationError):
        _clock_in(datetime(2026, 10, 19, 6, 58), shift="night")


def test_second_clock_in_same_day_is_rejected():
    first = _clock_in(datetime(2026, 10, 19, 6, 58))

    with pytest.raises(ValidationError, match="Already clocked in at 06:58"):
        _clock_in(datetime(2026, 10, 19, 9, 0), existing=first)


def test_clock_in_after_shift_ended_is_rejected():
    closed = AttendancePunch(employee_id="K-007", work_date=MONDAY, time_in=time(7, 0), time_out=time(17, 0))

    with pytest.raises(ValidationError, match="Shift already ended"):
        _clock_in(datetime(2026, 10, 19, 18, 0), existing=closed)


def test_clock_out_without_clock_in_is_rejected():
    with pytest.raises(ValidationError, match="No clock-in recorded"):
        _classifier().clock_out(staff=STAFF, shop=SHOP, now=datetime(2026, 10, 19, 17, 0), existing=None)


def test_clock_out_sets_shift_ended_and_hours():
    existing = _clock_in(datetime(2026, 10, 19, 6, 58))

    punch = _classifier().clock_out(staff=STAFF, shop=SHOP, now=datetime(2026, 10, 19, 17, 0), existing=existing)

    assert punch.status == PunchStatus.SHIFT_ENDED
    assert punch.time_out == time(17, 0)
    assert punch.time_in is None
    assert punch.total_hours == 10.03


def test_clock_out_twice_is_rejected():
    existing = AttendancePunch(employee_id="K-007", work_date=MONDAY, time_in=time(7, 0), time_out=time(17, 0))

    with pytest.raises(ValidationError, match="Already clocked out"):
        _classifier().clock_out(staff=STAFF, shop=SHOP, now=datetime(2026, 10, 19, 18, 0), existing=existing)


def test_hours_between_rounds_to_two_places():
    assert hours_between(datetime(2026, 10, 19, 8, 0), datetime(2026, 10, 19, 16, 20)) == 8.33
    assert hours_between(datetime(2026, 10, 19, 8, 0), datetime(2026, 10, 19, 8, 0)) == 0.0
