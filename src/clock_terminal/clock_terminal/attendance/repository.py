from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from .model import AttendancePunch


class AttendanceStore(Protocol):
    """Remote attendance table.

    Implementations raise RemoteStoreError on network/server failures.
    """

    def upsert_attendance(self, punch: AttendancePunch) -> None:
        """Insert, or merge the punch's non-empty fields into the existing (employee, date) row."""

        raise NotImplementedError

    def query_attendance(self, employee_id: str, work_date: date) -> Optional[AttendancePunch]:
        raise NotImplementedError

    def ping(self) -> bool:
        raise NotImplementedError
