from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.constants import DAY_RECORDS_KEY
from ..storage.local_store import LocalStore
from .model import AttendancePunch


class LocalDayRecords:
    """This device's own view of today's attendance rows.

    Every punch the terminal accepts (written remotely or queued) is merged
    into the row kept here, so the day can still be validated when the remote
    table cannot be read. Rows from earlier dates are dropped on write.
    """

    def __init__(self, store: LocalStore):
        self._store = store

    def get(self, employee_id: str, work_date: date) -> Optional[AttendancePunch]:
        ref_id = AttendancePunch(employee_id=employee_id, work_date=work_date).ref_id
        payload = (self._store.get_json(DAY_RECORDS_KEY, default={}) or {}).get(ref_id)
        return AttendancePunch.from_payload(payload) if payload else None

    def remember(self, punch: AttendancePunch) -> AttendancePunch:
        rows = self._store.get_json(DAY_RECORDS_KEY, default={}) or {}
        day = punch.work_date.isoformat()
        rows = {ref: row for ref, row in rows.items() if row.get("work_date") == day}

        existing = rows.get(punch.ref_id)
        merged = AttendancePunch.from_payload(existing).merge(punch) if existing else punch
        rows[punch.ref_id] = merged.to_payload()
        self._store.set_json(DAY_RECORDS_KEY, rows)
        return merged
