from __future__ import annotations

import threading
from datetime import date
from typing import Iterable, List, Optional

from ..attendance.model import AttendancePunch, QueuedPunch
from ..core.enums import PunchType
from ..storage.local_store import LocalStore

_KIND = "attendance"


class OfflinePunchQueue:
    """Durable FIFO of punches not yet acknowledged by the remote store.

    Enqueue, remove and a whole sync pass share one re-entrant lock, so a
    drain never reads the outbox while an append is half done.
    """

    def __init__(self, store: LocalStore, *, lock: Optional[threading.RLock] = None):
        self._store = store
        self.lock = lock or threading.RLock()

    def enqueue(self, punch_type: PunchType, punch: AttendancePunch) -> QueuedPunch:
        with self.lock:
            row = self._store.append_outbox(
                kind=_KIND,
                ref_id=punch.ref_id,
                payload={"type": punch_type.value, "record": punch.to_payload()},
            )
        return _to_queued(row)

    def list(self) -> List[QueuedPunch]:
        with self.lock:
            return [_to_queued(r) for r in self._store.list_outbox() if r["kind"] == _KIND]

    def pending_for(self, employee_id: str, work_date: date) -> List[QueuedPunch]:
        ref_id = AttendancePunch(employee_id=employee_id, work_date=work_date).ref_id
        with self.lock:
            return [_to_queued(r) for r in self._store.list_outbox(ref_id=ref_id)]

    def remove(self, ids: Iterable[int]) -> int:
        with self.lock:
            return self._store.delete_outbox(ids)

    def record_failure(self, queue_id: int, error: str) -> None:
        with self.lock:
            self._store.mark_outbox_failed(queue_id, error)

    def count(self) -> int:
        return self._store.count_outbox()


def _to_queued(row: dict) -> QueuedPunch:
    payload = row["payload"]
    return QueuedPunch(
        queue_id=row["id"],
        punch_type=PunchType(payload["type"]),
        punch=AttendancePunch.from_payload(payload["record"]),
        created_utc=row["created_utc"],
        attempts=row["attempts"],
        last_error=row["last_error"],
    )
