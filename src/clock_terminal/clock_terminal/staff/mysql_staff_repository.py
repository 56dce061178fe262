from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector

from ..core.exceptions import RemoteStoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import StaffCredential, normalize_employee_id
from .repository import StaffDirectory


def _to_credential(r: dict) -> StaffCredential:
    return StaffCredential(
        employee_id=normalize_employee_id(r["employee_id"]),
        name=r["employee_name"],
        pin=str(r["pin"]),
        home_shop=r.get("home_shop"),
    )


class MySQLStaffRepository(StaffDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def lookup_staff(self, employee_id: str, pin: str) -> Optional[StaffCredential]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    SELECT employee_id, employee_name, pin, home_shop
                    FROM staff
                    WHERE UPPER(employee_id)=%s AND pin=%s AND is_active=1
                    """,
                    (normalize_employee_id(employee_id), pin),
                )
                r = fetchone(cur)
        except mysql.connector.Error as e:
            raise RemoteStoreError(f"staff lookup failed: {e}") from e
        return _to_credential(r) if r else None

    def list_staff(self) -> Sequence[StaffCredential]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    SELECT employee_id, employee_name, pin, home_shop
                    FROM staff
                    WHERE is_active=1
                    ORDER BY employee_id
                    """
                )
                rows = fetchall(cur)
        except mysql.connector.Error as e:
            raise RemoteStoreError(f"staff listing failed: {e}") from e
        return [_to_credential(r) for r in rows]
