"""
SQLite key-value substrate for the academic catalog.

Values are serialized strings stored under string keys, with a byte quota
across all keys so the store behaves like bounded browser storage.
"""
import sqlite3
from pathlib import Path
from typing import List, Optional

from ..config import STORE_CAPACITY_BYTES
from ..exceptions import QuotaExceededError


class KeyValueBackend:
    """SQLite wrapper exposing a bounded string key-value store."""

    def __init__(self, db_path: str, capacity_bytes: int = STORE_CAPACITY_BYTES):
        self.db_path = db_path
        self.capacity_bytes = capacity_bytes
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self._create_tables()

    def _create_tables(self):
        """Create the key-value table."""
        cursor = self.conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                size INTEGER NOT NULL
            )
        """)
        self.conn.commit()

    def get(self, key: str) -> Optional[str]:
        """Get the value stored under key, or None."""
        cursor = self.conn.cursor()
        cursor.execute("SELECT value FROM kv WHERE key = ?", (key,))
        row = cursor.fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str):
        """Store value under key.

        Raises QuotaExceededError if the write would exceed capacity; the
        previous value is left untouched in that case.
        """
        size = len(value.encode("utf-8"))
        cursor = self.conn.cursor()
        cursor.execute("SELECT COALESCE(SUM(size), 0) AS total FROM kv WHERE key != ?", (key,))
        others = cursor.fetchone()["total"]
        if others + size > self.capacity_bytes:
            raise QuotaExceededError(key, others + size, self.capacity_bytes)

        cursor.execute("""
            INSERT OR REPLACE INTO kv (key, value, size)
            VALUES (?, ?, ?)
        """, (key, value, size))
        self.conn.commit()

    def remove(self, key: str):
        """Delete a key if present."""
        cursor = self.conn.cursor()
        cursor.execute("DELETE FROM kv WHERE key = ?", (key,))
        self.conn.commit()

    def keys(self) -> List[str]:
        """All stored keys."""
        cursor = self.conn.cursor()
        cursor.execute("SELECT key FROM kv ORDER BY key")
        return [row["key"] for row in cursor.fetchall()]

    def usage(self) -> int:
        """Total bytes currently stored."""
        cursor = self.conn.cursor()
        cursor.execute("SELECT COALESCE(SUM(size), 0) AS total FROM kv")
        return cursor.fetchone()["total"]

    def close(self):
        """Close database connection."""
        self.conn.close()
