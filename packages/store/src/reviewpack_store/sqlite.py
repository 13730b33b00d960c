"""SQLiteStore - hand-off state in a local SQLite database.

Schema:
  handoff - one row per key; writes replace the previous value.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone

from reviewpack_store.base import BaseStore

_SCHEMA = """
CREATE TABLE IF NOT EXISTS handoff (
    key         TEXT PRIMARY KEY,
    value       TEXT NOT NULL,
    updated_at  TEXT NOT NULL
);
"""


class SQLiteStore(BaseStore):
    """Stores hand-off state in a SQLite database file.

    The database file path defaults to `.reviewpack.db` in the current working
    directory. Configure via .reviewpack.yml: `store_path: /path/to/state.db`.
    """

    def __init__(self, db_path: str = ".reviewpack.db"):
        self._conn = sqlite3.connect(db_path)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def get(self, key: str) -> str | None:
        row = self._conn.execute("SELECT value FROM handoff WHERE key=?", (key,)).fetchone()
        return row["value"] if row is not None else None

    def set(self, key: str, value: str) -> None:
        self._conn.execute(
            """
            INSERT INTO handoff (key, value, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
            """,
            (key, value, datetime.now(timezone.utc).isoformat()),
        )
        self._conn.commit()

    def delete(self, key: str) -> None:
        self._conn.execute("DELETE FROM handoff WHERE key=?", (key,))
        self._conn.commit()

    def keys(self) -> list[str]:
        return [row["key"] for row in self._conn.execute("SELECT key FROM handoff ORDER BY key").fetchall()]

    def close(self) -> None:
        self._conn.close()
