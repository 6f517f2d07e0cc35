"""SQLite-backed key-value store."""

import json
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Any

from snowtrack.storage.database import connect, run_migrations
from snowtrack.storage.store import StoreError


class SqliteStore:
    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with closing(connect(self.db_path)) as conn:
            run_migrations(conn)

    def get(self, key: str) -> dict[str, Any] | None:
        try:
            with closing(connect(self.db_path)) as conn:
                row = conn.execute(
                    "SELECT value_json FROM kv_records WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read {key}: {e}") from e
        if row is None:
            return None
        return json.loads(row["value_json"])

    def set(self, key: str, record: dict[str, Any]) -> None:
        try:
            with closing(connect(self.db_path)) as conn:
                conn.execute(
                    "INSERT INTO kv_records (key, value_json, updated_at) "
                    "VALUES (?, ?, CURRENT_TIMESTAMP) "
                    "ON CONFLICT(key) DO UPDATE SET value_json = excluded.value_json, "
                    "updated_at = CURRENT_TIMESTAMP",
                    (key, json.dumps(record)),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to write {key}: {e}") from e

    def get_all_by_prefix(self, prefix: str) -> dict[str, Any]:
        # substr comparison is case-sensitive, unlike LIKE
        try:
            with closing(connect(self.db_path)) as conn:
                rows = conn.execute(
                    "SELECT key, value_json FROM kv_records "
                    "WHERE substr(key, 1, ?) = ? ORDER BY key",
                    (len(prefix), prefix),
                ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to scan prefix {prefix}: {e}") from e
        return {row["key"]: json.loads(row["value_json"]) for row in rows}
