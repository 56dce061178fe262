"""Seed demo staff into the remote database.

Usage: python scripts/seed_db.py [staff.json]

The JSON file holds a list of {"employee_id", "name", "pin", "home_shop"}.
"""
from __future__ import annotations

import importlib
import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.clock_terminal.clock_terminal.database.bootstrap import seed_staff
from src.clock_terminal.clock_terminal.database.connection import DatabaseConnection, DBConfig

DEMO_STAFF = [
    {"employee_id": "K-001", "name": "Demo Tailor", "pin": "1234", "home_shop": "315"},
    {"employee_id": "K-007", "name": "Demo Cutter", "pin": "0007", "home_shop": "172"},
    {"employee_id": "S-010", "name": "Demo Sales", "pin": "4321", "home_shop": "Stage"},
]


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection(DBConfig.from_mapping(settings.DB_CONFIG))

    rows = DEMO_STAFF
    if len(sys.argv) > 1:
        rows = json.loads(Path(sys.argv[1]).read_text(encoding="utf-8"))

    count = seed_staff(conn, rows)
    print(f"OK: Seeded {count} staff -> {conn.config.database}")


if __name__ == "__main__":
    main()
