"""
Key-value storage backends.

PresetStore depends only on get/set/delete of opaque byte values, plus a
key listing used to recover the backup index.
SqliteKeyValueStore is the durable single-file backend; MemoryKeyValueStore
backs tests and throwaway sessions.
"""

import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from .errors import PersistenceError, StorageReadError, StorageWriteError


# Database schema version for migrations
SCHEMA_VERSION = 1

DEFAULT_DB_FILENAME = "stylekit.db"


class KeyValueStore(Protocol):
    """Minimal storage capability consumed by PresetStore."""

    def get(self, key: str) -> Optional[bytes]:
        ...

    def set(self, key: str, value: bytes) -> None:
        ...

    def delete(self, key: str) -> None:
        ...

    def keys(self) -> List[str]:
        ...


class MemoryKeyValueStore:
    """Dict-backed store. Nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._data: Dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data.keys())


class SqliteKeyValueStore:
    """
    Single-file SQLite key-value store.

    One connection per operation, so an instance may be shared across
    threads. Every write commits immediately.
    """

    def __init__(self, db_path: Optional[str] = None):
        """
        Args:
            db_path: Path to SQLite database file (defaults to ./stylekit.db)
        """
        if db_path is None:
            db_path = str(Path.cwd() / DEFAULT_DB_FILENAME)

        self.db_path = db_path
        self._ensure_schema()

    @contextmanager
    def _connect(self):
        """Context manager for database connections."""
        conn = sqlite3.connect(self.db_path)
        try:
            yield conn
            conn.commit()
        except Exception as e:
            conn.rollback()
            raise PersistenceError(f"Database operation failed: {e}") from e
        finally:
            conn.close()

    def _ensure_schema(self):
        """Create schema if it doesn't exist."""
        with self._connect() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY,
                    applied_at TEXT NOT NULL
                )
            """)

            cursor.execute("SELECT version FROM schema_version ORDER BY version DESC LIMIT 1")
            row = cursor.fetchone()
            current_version = row[0] if row else 0

            if current_version < SCHEMA_VERSION:
                self._migrate_schema(conn, current_version)

    def _migrate_schema(self, conn, from_version: int):
        """Apply schema migrations."""
        cursor = conn.cursor()

        if from_version < 1:
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value BLOB NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute(
                "INSERT INTO schema_version (version, applied_at) VALUES (?, ?)",
                (1, datetime.now(timezone.utc).isoformat())
            )

    def get(self, key: str) -> Optional[bytes]:
        try:
            with self._connect() as conn:
                row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        except PersistenceError as e:
            raise StorageReadError(f"Failed to read {key}: {e}") from e
        if row is None:
            return None
        return bytes(row[0])

    def set(self, key: str, value: bytes) -> None:
        try:
            with self._connect() as conn:
                conn.execute("""
                    INSERT INTO kv_store (key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                """, (key, sqlite3.Binary(value), datetime.now(timezone.utc).isoformat()))
        except PersistenceError as e:
            raise StorageWriteError(f"Failed to write {key}: {e}") from e

    def delete(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))

    def keys(self) -> List[str]:
        with self._connect() as conn:
            rows = conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        return [row[0] for row in rows]
