from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..core.constants import STAFF_SNAPSHOT_KEY
from ..storage.local_store import LocalStore
from .model import StaffCredential, StaffMember, normalize_employee_id

logger = logging.getLogger(__name__)

DEFAULT_PIN_HASH_METHOD = "pbkdf2:sha256:50000"


class CredentialCache:
    """Local read-only copy of the staff roster used while offline.

    The snapshot is replaced as a whole on every refresh; single entries are
    never invalidated. PINs are kept as salted hashes.
    """

    def __init__(self, store: LocalStore, *, pin_hash_method: str = DEFAULT_PIN_HASH_METHOD):
        self._store = store
        self._method = pin_hash_method

    def _load(self) -> dict:
        return self._store.get_json(STAFF_SNAPSHOT_KEY, default={}) or {}

    def replace(self, staff: Iterable[StaffCredential]) -> int:
        entries = {}
        for s in staff:
            key = normalize_employee_id(s.employee_id)
            entries[key] = {
                "employee_id": key,
                "name": s.name,
                "home_shop": s.home_shop,
                "pin_hash": generate_password_hash(s.pin, method=self._method),
            }
        self._store.set_json(
            STAFF_SNAPSHOT_KEY,
            {"refreshed_at": datetime.now(timezone.utc).isoformat(), "staff": entries},
        )
        return len(entries)

    def snapshot(self) -> dict:
        """Raw snapshot as stored: {refreshed_at, staff: {id: entry}}."""
        return self._load()

    @property
    def refreshed_at(self) -> Optional[str]:
        return self._load().get("refreshed_at")

    def is_empty(self) -> bool:
        return not self._load().get("staff")

    def size(self) -> int:
        return len(self._load().get("staff") or {})

    def match(self, employee_id: str, pin: str) -> Optional[StaffMember]:
        entry = (self._load().get("staff") or {}).get(normalize_employee_id(employee_id))
        if not entry:
            return None
        if not check_password_hash(entry["pin_hash"], pin):
            return None
        return StaffMember(employee_id=entry["employee_id"], name=entry["name"], home_shop=entry.get("home_shop"))

    def contains(self, employee_id: str) -> bool:
        return normalize_employee_id(employee_id) in (self._load().get("staff") or {})
