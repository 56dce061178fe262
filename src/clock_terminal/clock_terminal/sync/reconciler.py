from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Set, Tuple

from ..attendance.repository import AttendanceStore
from ..core.exceptions import RemoteStoreError
from .queue import OfflinePunchQueue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncReport:
    synced: int
    pending: int
    failed_ids: List[int] = field(default_factory=list)


class SyncReconciler:
    """Drain the offline queue into the remote store.

    At-least-once delivery: each entry is upserted (field merge keyed by
    employee and date) and removed only after the write succeeds. Once an
    entry fails, later entries for the same employee and date wait for the
    next pass so a clock-out is never applied ahead of its clock-in.
    """

    def __init__(self, queue: OfflinePunchQueue, store: AttendanceStore):
        self._queue = queue
        self._store = store

    def drain(self) -> SyncReport:
        with self._queue.lock:
            entries = self._queue.list()
            if not entries:
                return SyncReport(synced=0, pending=0)

            done: List[int] = []
            failed: List[int] = []
            blocked: Set[Tuple[str, date]] = set()

            for entry in entries:
                key = entry.punch.key
                if key in blocked:
                    continue
                try:
                    self._store.upsert_attendance(entry.punch)
                except RemoteStoreError as e:
                    logger.warning("Replay of queued punch %s (%s) failed: %s", entry.queue_id, entry.punch.ref_id, e)
                    self._queue.record_failure(entry.queue_id, str(e))
                    failed.append(entry.queue_id)
                    blocked.add(key)
                    continue
                done.append(entry.queue_id)

            self._queue.remove(done)
            pending = len(entries) - len(done)

        if done:
            logger.info("Cloud synced: %d records updated, %d pending", len(done), pending)
        return SyncReport(synced=len(done), pending=pending, failed_ids=failed)
