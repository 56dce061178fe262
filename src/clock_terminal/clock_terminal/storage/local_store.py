from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS kv (
        key TEXT PRIMARY KEY,
        value_json TEXT NOT NULL,
        updated_utc TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS outbox (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        kind TEXT NOT NULL,
        ref_id TEXT NOT NULL,
        created_utc TEXT NOT NULL,
        payload_json TEXT NOT NULL,
        attempts INTEGER NOT NULL DEFAULT 0,
        last_error TEXT
    )
    """,
    "CREATE INDEX IF NOT EXISTS ix_outbox_ref ON outbox(ref_id)",
)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class LocalStore:
    """Device-local persistent storage (SQLite file).

    Holds the staff roster snapshot, the sticky branch and the punch outbox.
    Every call opens a short-lived connection and commits before returning.
    """

    def __init__(self, path: str | Path):
        self._path = str(path)
        Path(self._path).parent.mkdir(parents=True, exist_ok=True)
        with self._cursor() as cur:
            for stmt in _SCHEMA:
                cur.execute(stmt)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._path, timeout=30)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=FULL;")
        return conn

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        conn = self._connect()
        try:
            cur = conn.cursor()
            try:
                yield cur
                conn.commit()
            finally:
                cur.close()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    # -- key/value -------------------------------------------------------

    def get_json(self, key: str, default: Any = None) -> Any:
        with self._cursor() as cur:
            row = cur.execute("SELECT value_json FROM kv WHERE key=?", (key,)).fetchone()
        return json.loads(row["value_json"]) if row else default

    def set_json(self, key: str, value: Any) -> None:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO kv(key, value_json, updated_utc) VALUES(?,?,?)
                ON CONFLICT(key) DO UPDATE SET value_json=excluded.value_json, updated_utc=excluded.updated_utc
                """,
                (key, json.dumps(value, separators=(",", ":")), _utc_now()),
            )

    def delete(self, key: str) -> None:
        with self._cursor() as cur:
            cur.execute("DELETE FROM kv WHERE key=?", (key,))

    # -- outbox ----------------------------------------------------------

    def append_outbox(self, *, kind: str, ref_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        created = _utc_now()
        with self._cursor() as cur:
            cur.execute(
                "INSERT INTO outbox(kind, ref_id, created_utc, payload_json) VALUES(?,?,?,?)",
                (kind, ref_id, created, json.dumps(payload, separators=(",", ":"))),
            )
            oid = int(cur.lastrowid)
        return {
            "id": oid,
            "kind": kind,
            "ref_id": ref_id,
            "created_utc": created,
            "payload": payload,
            "attempts": 0,
            "last_error": None,
        }

    def list_outbox(self, *, ref_id: Optional[str] = None) -> List[Dict[str, Any]]:
        sql = "SELECT id, kind, ref_id, created_utc, payload_json, attempts, last_error FROM outbox"
        params: tuple = ()
        if ref_id is not None:
            sql += " WHERE ref_id=?"
            params = (ref_id,)
        with self._cursor() as cur:
            rows = cur.execute(sql + " ORDER BY id ASC", params).fetchall()
        return [
            {
                "id": int(r["id"]),
                "kind": r["kind"],
                "ref_id": r["ref_id"],
                "created_utc": r["created_utc"],
                "payload": json.loads(r["payload_json"]),
                "attempts": int(r["attempts"]),
                "last_error": r["last_error"],
            }
            for r in rows
        ]

    def delete_outbox(self, ids: Iterable[int]) -> int:
        ids = [int(i) for i in ids]
        if not ids:
            return 0
        with self._cursor() as cur:
            removed = 0
            for oid in ids:
                cur.execute("DELETE FROM outbox WHERE id=?", (oid,))
                removed += cur.rowcount
            return removed

    def mark_outbox_failed(self, oid: int, error: str) -> None:
        with self._cursor() as cur:
            cur.execute("UPDATE outbox SET attempts=attempts+1, last_error=? WHERE id=?", (error, int(oid)))

    def count_outbox(self) -> int:
        with self._cursor() as cur:
            return int(cur.execute("SELECT COUNT(*) FROM outbox").fetchone()[0])
