"""
SQLiteStorage: file-backed storage for cache records.

Records live in a single table:

    items(key TEXT PRIMARY KEY, value TEXT NOT NULL)

Enumeration follows rowid, which is insertion order. An optional quota,
counted in characters of key plus value, makes the store behave like
quota-limited browser storage; SQLite's own "disk is full" errors are
treated as capacity errors too.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from offline_cache.exceptions import QuotaExceededError, StoreError


class SQLiteStorage:
    """SQLite-backed storage.

    Not safe for concurrent writers; one connection per instance.
    """

    def __init__(self, db_path: Path | str, quota: int | None = None) -> None:
        """Initialize SQLiteStorage.

        Args:
            db_path: Path to the database file, or ":memory:".
            quota: Maximum characters of key plus value across all records.
        """
        self.db_path = db_path if str(db_path) == ":memory:" else Path(db_path)
        self.quota = quota
        self._conn: sqlite3.Connection | None = None
        self._initialized = False

    def init(self) -> None:
        """Create the schema. Safe to call multiple times."""
        if self._initialized:
            return

        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = self._get_conn()
        with conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS items (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
        self._initialized = True

    def _get_conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(
                str(self.db_path),
                timeout=30.0,
                isolation_level="DEFERRED",
            )
        return self._conn

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            self._initialized = False

    def _query_one(self, sql: str, params: tuple = ()) -> tuple | None:
        self.init()
        try:
            return self._get_conn().execute(sql, params).fetchone()
        except sqlite3.Error as e:
            raise StoreError(str(e), context={"operation": "query"}) from e

    @property
    def length(self) -> int:
        row = self._query_one("SELECT COUNT(*) FROM items")
        return row[0] if row else 0

    @property
    def used(self) -> int:
        """Characters currently in use."""
        row = self._query_one(
            "SELECT COALESCE(SUM(LENGTH(key) + LENGTH(value)), 0) FROM items"
        )
        return row[0] if row else 0

    def key(self, index: int) -> str | None:
        if index < 0:
            return None
        row = self._query_one(
            "SELECT key FROM items ORDER BY rowid LIMIT 1 OFFSET ?", (index,)
        )
        return row[0] if row else None

    def get_item(self, key: str) -> str | None:
        row = self._query_one("SELECT value FROM items WHERE key = ?", (key,))
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StoreError(
                "Storage only accepts strings",
                context={"operation": "set_item", "key": key},
            )

        if self.quota is not None:
            existing = self.get_item(key)
            freed = len(key) + len(existing) if existing is not None else 0
            needed = len(key) + len(value)
            used = self.used
            if used - freed + needed > self.quota:
                raise QuotaExceededError(
                    "Storage quota exceeded",
                    context={"quota": self.quota, "used": used, "requested": needed},
                )

        self.init()
        conn = self._get_conn()
        try:
            with conn:
                conn.execute(
                    """
                    INSERT INTO items (key, value) VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value
                    """,
                    (key, value),
                )
        except sqlite3.OperationalError:
            # Disk-full errors are classified by the caller
            raise
        except sqlite3.Error as e:
            raise StoreError(str(e), context={"operation": "set_item", "key": key}) from e

    def remove_item(self, key: str) -> None:
        self.init()
        conn = self._get_conn()
        try:
            with conn:
                conn.execute("DELETE FROM items WHERE key = ?", (key,))
        except sqlite3.Error as e:
            raise StoreError(str(e), context={"operation": "remove_item", "key": key}) from e

    def clear(self) -> None:
        self.init()
        conn = self._get_conn()
        with conn:
            conn.execute("DELETE FROM items")
