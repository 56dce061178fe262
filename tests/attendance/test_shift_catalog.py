from datetime import date, time

import pytest

from src.clock_terminal.clock_terminal.common.datetime_utils import js_weekday
from src.clock_terminal.clock_terminal.core.exceptions import ValidationError
from src.clock_terminal.clock_terminal.shifts.catalog import ShiftCatalog


def _catalog(**kwargs) -> ShiftCatalog:
    return ShiftCatalog.from_settings({"early": "07:00", "standard": "08:00"}, **kwargs)


def test_js_weekday_counts_from_sunday():
    assert js_weekday(date(2026, 10, 18)) == 0
    assert js_weekday(date(2026, 10, 19)) == 1
    assert js_weekday(date(2026, 10, 24)) == 6


def test_weekday_uses_shift_start():
    catalog = _catalog()

    assert catalog.expected_start("early", date(2026, 10, 19)) == time(7, 0)
    assert catalog.expected_start("standard", date(2026, 10, 19)) == time(8, 0)


def test_sunday_uses_weekly_start():
    catalog = _catalog()

    assert catalog.is_weekly_day(date(2026, 10, 18))
    assert catalog.expected_start("early", date(2026, 10, 18)) == time(11, 0)


def test_weekly_rule_can_be_disabled():
    catalog = _catalog(weekly_start=None)

    assert not catalog.is_weekly_day(date(2026, 10, 18))
    assert catalog.expected_start("early", date(2026, 10, 18)) == time(7, 0)


def test_unknown_label():
    with pytest.raises(ValidationError, match="Unknown shift"):
        _catalog().get("night")
