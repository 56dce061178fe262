from __future__ import annotations

from datetime import date
from typing import Optional

import mysql.connector

from ..core.enums import PunchStatus
from ..core.exceptions import RemoteStoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time
from .model import AttendancePunch
from .repository import AttendanceStore

_MERGED_COLUMNS = (
    "employee_name",
    "shop",
    "status",
    "time_in",
    "time_out",
    "latitude",
    "longitude",
    "shift_label",
    "total_hours",
    "is_paid",
)


class MySQLAttendanceRepository(AttendanceStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert_attendance(self, punch: AttendancePunch) -> None:
        # NULL means "not written by this punch": keep the stored value.
        updates = ",\n".join(f"{c}=COALESCE(VALUES({c}), {c})" for c in _MERGED_COLUMNS)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    INSERT INTO attendance(
                        employee_id, work_date, employee_name, shop, status,
                        time_in, time_out, latitude, longitude, shift_label, total_hours, is_paid
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,COALESCE(%s, 0))
                    ON DUPLICATE KEY UPDATE
                    {updates}
                    """,
                    (
                        punch.employee_id,
                        punch.work_date,
                        punch.employee_name,
                        punch.shop,
                        punch.status.value if punch.status else None,
                        punch.time_in,
                        punch.time_out,
                        punch.latitude,
                        punch.longitude,
                        punch.shift,
                        punch.total_hours,
                        punch.is_paid,
                    ),
                )
        except mysql.connector.Error as e:
            raise RemoteStoreError(f"attendance upsert failed for {punch.ref_id}: {e}") from e

    def query_attendance(self, employee_id: str, work_date: date) -> Optional[AttendancePunch]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    SELECT employee_id, work_date, employee_name, shop, status, time_in, time_out,
                           latitude, longitude, shift_label, total_hours, is_paid
                    FROM attendance
                    WHERE employee_id=%s AND work_date=%s
                    """,
                    (employee_id, work_date),
                )
                r = fetchone(cur)
        except mysql.connector.Error as e:
            raise RemoteStoreError(f"attendance query failed: {e}") from e
        if not r:
            return None
        return AttendancePunch(
            employee_id=r["employee_id"],
            work_date=r["work_date"],
            employee_name=r.get("employee_name"),
            shop=r.get("shop"),
            status=PunchStatus(r["status"]) if r.get("status") else None,
            time_in=normalize_mysql_time(r.get("time_in")),
            time_out=normalize_mysql_time(r.get("time_out")),
            latitude=float(r["latitude"]) if r.get("latitude") is not None else None,
            longitude=float(r["longitude"]) if r.get("longitude") is not None else None,
            shift=r.get("shift_label"),
            total_hours=float(r["total_hours"]) if r.get("total_hours") is not None else None,
            is_paid=bool(r.get("is_paid")),
        )

    def ping(self) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("SELECT 1 AS ok")
                return bool(fetchone(cur))
        except mysql.connector.Error:
            return False
