"""Drain the device's offline punch queue once, outside the web app.

Useful after a long outage when the kiosk browser is closed.

Run:
  python scripts/sync_queue.py
"""
from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.clock_terminal.clock_terminal.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.clock_terminal.clock_terminal.database.connection import DatabaseConnection, DBConfig
from src.clock_terminal.clock_terminal.main import configure_logging
from src.clock_terminal.clock_terminal.storage.local_store import LocalStore
from src.clock_terminal.clock_terminal.sync.queue import OfflinePunchQueue
from src.clock_terminal.clock_terminal.sync.reconciler import SyncReconciler


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    store = MySQLAttendanceRepository(DatabaseConnection(DBConfig.from_mapping(settings.DB_CONFIG)))
    queue = OfflinePunchQueue(LocalStore(settings.LOCAL_STORE_PATH))

    if not store.ping():
        raise SystemExit(f"Remote store unreachable; {queue.count()} punches stay queued.")

    report = SyncReconciler(queue, store).drain()
    print(f"OK: synced={report.synced} pending={report.pending}")


if __name__ == "__main__":
    main()
