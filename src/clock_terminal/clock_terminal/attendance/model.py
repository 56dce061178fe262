from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import date, time
from typing import Any, Dict, Optional, Tuple

from ..common.datetime_utils import parse_clock_time, parse_iso_date
from ..core.enums import PunchStatus, PunchType


@dataclass(frozen=True)
class AttendancePunch:
    """One staff member's attendance row for one calendar date.

    Logical key: (employee_id, work_date). Fields left as None are "not
    written by this punch" and never clear a stored value on merge.
    """

    employee_id: str
    work_date: date
    employee_name: Optional[str] = None
    shop: Optional[str] = None
    status: Optional[PunchStatus] = None
    time_in: Optional[time] = None
    time_out: Optional[time] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    shift: Optional[str] = None
    total_hours: Optional[float] = None
    is_paid: Optional[bool] = None

    @property
    def key(self) -> Tuple[str, date]:
        return self.employee_id, self.work_date

    @property
    def ref_id(self) -> str:
        return f"{self.employee_id}|{self.work_date.isoformat()}"

    @property
    def is_open(self) -> bool:
        return self.time_in is not None and self.time_out is None

    def merge(self, newer: "AttendancePunch") -> "AttendancePunch":
        """Field-level merge: newer non-empty fields win, the rest is kept."""
        if newer.key != self.key:
            raise ValueError(f"cannot merge {newer.ref_id} into {self.ref_id}")
        changes = {
            f.name: getattr(newer, f.name)
            for f in fields(self)
            if f.name not in ("employee_id", "work_date") and getattr(newer, f.name) is not None
        }
        return replace(self, **changes)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "employee_id": self.employee_id,
            "work_date": self.work_date.isoformat(),
            "employee_name": self.employee_name,
            "shop": self.shop,
            "status": self.status.value if self.status else None,
            "time_in": self.time_in.strftime("%H:%M:%S") if self.time_in else None,
            "time_out": self.time_out.strftime("%H:%M:%S") if self.time_out else None,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "shift": self.shift,
            "total_hours": self.total_hours,
            "is_paid": self.is_paid,
        }

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "AttendancePunch":
        return cls(
            employee_id=data["employee_id"],
            work_date=parse_iso_date(data["work_date"]),
            employee_name=data.get("employee_name"),
            shop=data.get("shop"),
            status=PunchStatus(data["status"]) if data.get("status") else None,
            time_in=parse_clock_time(data["time_in"]) if data.get("time_in") else None,
            time_out=parse_clock_time(data["time_out"]) if data.get("time_out") else None,
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            shift=data.get("shift"),
            total_hours=data.get("total_hours"),
            is_paid=data.get("is_paid"),
        )


@dataclass(frozen=True)
class QueuedPunch:
    """A punch waiting in the device outbox for its remote write."""

    queue_id: int
    punch_type: PunchType
    punch: AttendancePunch
    created_utc: str
    attempts: int = 0
    last_error: Optional[str] = None
