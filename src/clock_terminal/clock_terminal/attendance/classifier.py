from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.constants import DEFAULT_LATE_GRACE_MINUTES
from ..core.exceptions import ValidationError
from ..geofence.model import Position
from ..shifts.catalog import ShiftCatalog
from ..shops.model import ShopLocation
from ..staff.model import StaffMember
from .factory import PunchStrategyFactory
from .model import AttendancePunch


def hours_between(start: datetime, end: datetime) -> float:
    return round((end - start).total_seconds() / 3600, 2)


class PunchClassifier:
    """Build the attendance row written by a clock-in or clock-out.

    `existing` is the caller's best view of today's row for the employee
    (remote record merged with punches still queued on this device).
    """

    def __init__(
        self,
        catalog: ShiftCatalog,
        *,
        strategy_factory: PunchStrategyFactory | None = None,
        grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
    ):
        self._catalog = catalog
        self._factory = strategy_factory or PunchStrategyFactory()
        self._grace_minutes = int(grace_minutes)

    def clock_in(
        self,
        *,
        staff: StaffMember,
        shop: ShopLocation,
        shift_label: str,
        now: datetime,
        existing: Optional[AttendancePunch],
        position: Optional[Position] = None,
    ) -> AttendancePunch:
        if existing and existing.time_in is not None:
            if existing.time_out is not None:
                raise ValidationError("Shift already ended for today")
            raise ValidationError(f"Already clocked in at {existing.time_in.strftime('%H:%M')}")

        expected = self._catalog.expected_start(shift_label, now.date())
        strategy = self._factory.for_clock_in(now=now, expected_start=expected, grace_minutes=self._grace_minutes)
        decision = strategy.decide_clock_in(now=now, expected_start=expected)

        return AttendancePunch(
            employee_id=staff.employee_id,
            work_date=now.date(),
            employee_name=staff.name,
            shop=shop.name,
            status=decision.status,
            time_in=now.time().replace(microsecond=0),
            latitude=position.latitude if position else None,
            longitude=position.longitude if position else None,
            shift=shift_label,
            is_paid=False,
        )

    def clock_out(
        self,
        *,
        staff: StaffMember,
        shop: ShopLocation,
        now: datetime,
        existing: Optional[AttendancePunch],
        position: Optional[Position] = None,
    ) -> AttendancePunch:
        if not existing or existing.time_in is None:
            raise ValidationError("No clock-in recorded for today")
        if existing.time_out is not None:
            raise ValidationError("Already clocked out today")

        clock_in_at = datetime.combine(existing.work_date, existing.time_in)
        clock_out_at = now.replace(microsecond=0, tzinfo=None)
        if clock_out_at < clock_in_at:
            raise ValidationError("Clock-out cannot be earlier than clock-in")

        decision = self._factory.for_clock_out(now=now).decide_clock_out(now=now)

        return AttendancePunch(
            employee_id=staff.employee_id,
            work_date=existing.work_date,
            employee_name=staff.name,
            shop=shop.name,
            status=decision.status,
            time_out=clock_out_at.time(),
            latitude=position.latitude if position else None,
            longitude=position.longitude if position else None,
            total_hours=hours_between(clock_in_at, clock_out_at),
        )
