"""Named text slots with a shared byte quota.

A small stand-in for a browser's local storage: every slot holds one string,
and the sum of all key and value sizes may not exceed the configured quota.
The quota check and the write run in one ``BEGIN IMMEDIATE`` transaction.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

SLOTS_SCHEMA = """
CREATE TABLE IF NOT EXISTS slots (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""

USED_BYTES_QUERY = """
SELECT COALESCE(SUM(LENGTH(CAST(key AS BLOB)) + LENGTH(CAST(value AS BLOB))), 0) AS used
FROM slots WHERE key != ?
"""


class StorageQuotaExceededError(RuntimeError):
    """Raised when a write would push the slot table past its byte quota."""


def _entry_size(key: str, value: str) -> int:
    return len(key.encode("utf-8")) + len(value.encode("utf-8"))


@contextmanager
def _slots_connection(db_path: Path) -> Iterator[sqlite3.Connection]:
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    # autocommit mode; writers open their own transaction
    connection = sqlite3.connect(path, isolation_level=None)
    connection.row_factory = sqlite3.Row
    try:
        connection.executescript(SLOTS_SCHEMA)
        yield connection
    finally:
        connection.close()


def initialize_slots(db_path: Path) -> None:
    with _slots_connection(db_path):
        return


def get_slot(db_path: Path, key: str) -> str | None:
    with _slots_connection(db_path) as connection:
        row = connection.execute("SELECT value FROM slots WHERE key = ?", (key,)).fetchone()
    if row is None:
        return None
    return str(row["value"])


def set_slot(db_path: Path, key: str, value: str, *, max_bytes: int | None = None) -> None:
    with _slots_connection(db_path) as connection:
        connection.execute("BEGIN IMMEDIATE")
        try:
            if max_bytes is not None:
                used = int(connection.execute(USED_BYTES_QUERY, (key,)).fetchone()["used"])
                required = used + _entry_size(key, value)
                if required > max_bytes:
                    raise StorageQuotaExceededError(
                        f"Writing slot '{key}' needs {required} bytes, quota is {max_bytes}"
                    )
            connection.execute(
                """
                INSERT INTO slots (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
                """,
                (key, value, datetime.now(timezone.utc).isoformat()),
            )
        except Exception:
            connection.execute("ROLLBACK")
            raise
        connection.execute("COMMIT")
