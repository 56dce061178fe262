from datetime import datetime, time

from src.clock_terminal.clock_terminal.attendance.factory import PunchStrategyFactory
from src.clock_terminal.clock_terminal.attendance.strategies.base import ClockInStrategy, ClockOutStrategy
from src.clock_terminal.clock_terminal.attendance.strategies.late_strategy import LateStrategy
from src.clock_terminal.clock_terminal.attendance.strategies.on_time_strategy import OnTimeStrategy
from src.clock_terminal.clock_terminal.attendance.strategies.shift_ended_strategy import ShiftEndedStrategy
from src.clock_terminal.clock_terminal.core.enums import PunchStatus


def test_factory_clock_in_before_start_is_on_time():
    factory = PunchStrategyFactory()
    strategy = factory.for_clock_in(now=datetime(2026, 10, 19, 6, 58), expected_start=time(7, 0), grace_minutes=0)

    assert isinstance(strategy, OnTimeStrategy)


def test_factory_clock_in_within_start_minute_is_on_time():
    factory = PunchStrategyFactory()
    strategy = factory.for_clock_in(now=datetime(2026, 10, 19, 7, 0, 59), expected_start=time(7, 0), grace_minutes=0)

    assert isinstance(strategy, OnTimeStrategy)


def test_factory_clock_in_next_minute_is_late():
    factory = PunchStrategyFactory()
    strategy = factory.for_clock_in(now=datetime(2026, 10, 19, 7, 1), expected_start=time(7, 0), grace_minutes=0)

    assert isinstance(strategy, LateStrategy)
    decision = strategy.decide_clock_in(now=datetime(2026, 10, 19, 7, 1), expected_start=time(7, 0))
    assert decision.status == PunchStatus.LATE


def test_factory_grace_minutes_extend_deadline():
    factory = PunchStrategyFactory()
    now = datetime(2026, 10, 19, 7, 5, 30)

    assert isinstance(factory.for_clock_in(now=now, expected_start=time(7, 0), grace_minutes=5), OnTimeStrategy)
    assert isinstance(factory.for_clock_in(now=now, expected_start=time(7, 0), grace_minutes=4), LateStrategy)


def test_factory_clock_out_always_shift_ended():
    factory = PunchStrategyFactory()
    strategy = factory.for_clock_out(now=datetime(2026, 10, 19, 6, 0))

    assert isinstance(strategy, ShiftEndedStrategy)
    assert strategy.decide_clock_out(now=datetime(2026, 10, 19, 6, 0)).status == PunchStatus.SHIFT_ENDED


def test_clock_in_and_clock_out_strategies_are_separate_roles():
    factory = PunchStrategyFactory()
    arrival = factory.for_clock_in(now=datetime(2026, 10, 19, 6, 58), expected_start=time(7, 0), grace_minutes=0)
    departure = factory.for_clock_out(now=datetime(2026, 10, 19, 17, 0))

    assert isinstance(arrival, ClockInStrategy)
    assert not hasattr(arrival, "decide_clock_out")
    assert isinstance(departure, ClockOutStrategy)
    assert not hasattr(departure, "decide_clock_in")
