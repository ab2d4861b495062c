"""
Database module for Setlog.

SQLite-backed key-value store with two named collections.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from setlog.config import get_db_path

logger = logging.getLogger(__name__)

# Schema version for migrations
SCHEMA_VERSION = 1

SETTINGS = "settings"
LOGS = "logs"
COLLECTIONS = (SETTINGS, LOGS)

SCHEMA = """
-- Schema version tracking
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);

-- One row per record; a collection is a logical table.
CREATE TABLE IF NOT EXISTS records (
    collection TEXT NOT NULL CHECK(collection IN ('settings', 'logs')),
    key TEXT NOT NULL,
    value TEXT NOT NULL,                    -- JSON text of the record
    PRIMARY KEY (collection, key)
);
"""


def _check_collection(collection: str) -> None:
    if collection not in COLLECTIONS:
        raise ValueError(f"Unknown collection: {collection}")


class Database:
    """SQLite key-value wrapper for Setlog."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()
        self._ensure_db()

    def _ensure_db(self) -> None:
        """Ensure database exists and schema is current."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.executescript(SCHEMA)
            conn.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (SCHEMA_VERSION,)
            )

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def keys(self, collection: str) -> list[str]:
        """All keys of a collection, in key order."""
        _check_collection(collection)
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT key FROM records WHERE collection = ? ORDER BY key",
                (collection,)
            ).fetchall()
            return [row["key"] for row in rows]

    def items(self, collection: str) -> list[tuple[str, str]]:
        """All (key, stored text) pairs of a collection, in key order."""
        _check_collection(collection)
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT key, value FROM records WHERE collection = ? ORDER BY key",
                (collection,)
            ).fetchall()
            return [(row["key"], row["value"]) for row in rows]

    def get(self, collection: str, key: str) -> str | None:
        """Get the stored text for a key, or None if absent."""
        _check_collection(collection)
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM records WHERE collection = ? AND key = ?",
                (collection, key)
            ).fetchone()
            if row:
                return row["value"]
        return None

    def put(self, collection: str, key: str, value: Any) -> None:
        """
        Insert or fully replace the value stored under key.

        Mappings are JSON encoded. A string is taken to be an already
        encoded record and stored verbatim.
        """
        _check_collection(collection)
        text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)

        with self._connect() as conn:
            conn.execute("""
                INSERT OR REPLACE INTO records (collection, key, value)
                VALUES (?, ?, ?)
            """, (collection, key, text))
        logger.debug(f"put {collection}[{key}]")

    def delete(self, collection: str, key: str) -> bool:
        """Delete a key. Returns True if a record was removed."""
        _check_collection(collection)
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM records WHERE collection = ? AND key = ?",
                (collection, key)
            )
            removed = cursor.rowcount > 0
        logger.debug(f"delete {collection}[{key}] removed={removed}")
        return removed

    def count(self, collection: str) -> int:
        """Number of records in a collection."""
        _check_collection(collection)
        with self._connect() as conn:
            return conn.execute(
                "SELECT COUNT(*) FROM records WHERE collection = ?",
                (collection,)
            ).fetchone()[0]
