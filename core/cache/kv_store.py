# ruff: noqa: BLE001
"""Persistent key/value storage for the translation cache.

Defines the ``KeyValueStore`` protocol shared by both cache tiers and its SQLite implementation.
The SQLite store keeps a single connection in WAL mode; every blocking call runs in a worker thread
and is serialised by a lock so that the connection is never used by two threads at once.
"""

from __future__ import annotations

import asyncio
import sqlite3
import threading
import time
from typing import TYPE_CHECKING, ClassVar, Protocol

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from pathlib import Path

__all__: list[str] = ["KeyValueStore", "SQLiteKeyValueStore"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class KeyValueStore(Protocol):
    """Minimal async key/value contract with per-entry expiry."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl_seconds: float) -> bool: ...

    async def delete(self, key: str) -> None: ...


class SQLiteKeyValueStore:
    """SQLite-backed ``KeyValueStore``.

    Attributes:
        DB_SCHEMA_VERSION (ClassVar[int]): Schema version recorded in ``cache_metadata``.
    """

    DB_SCHEMA_VERSION: ClassVar[int] = 1

    def __init__(self, db_path: Path) -> None:
        self._db_path: Path = db_path
        self._db_conn: sqlite3.Connection | None = None
        self._lock: threading.Lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._db_conn is not None

    async def open(self) -> None:
        """Open the database and create the schema.

        Raises:
            RuntimeError: If the database cannot be opened or initialised.
        """
        await asyncio.to_thread(self._open_sync)

    def _open_sync(self) -> None:
        with self._lock:
            try:
                self._db_conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
                self._db_conn.execute("PRAGMA journal_mode=WAL")
                self._db_conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS kv_cache (
                        cache_key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        created_at INTEGER NOT NULL,
                        expires_at INTEGER NOT NULL
                    )
                    """
                )
                self._db_conn.execute("CREATE INDEX IF NOT EXISTS idx_expires_at ON kv_cache(expires_at)")
                self._db_conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS cache_metadata (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL
                    )
                    """
                )
                self._db_conn.execute(
                    "INSERT OR IGNORE INTO cache_metadata (key, value) VALUES (?, ?)",
                    ("schema_version", str(self.DB_SCHEMA_VERSION)),
                )
                row = self._db_conn.execute(
                    "SELECT value FROM cache_metadata WHERE key = ?", ("schema_version",)
                ).fetchone()
                if row is not None and row[0] != str(self.DB_SCHEMA_VERSION):
                    logger.warning(
                        "Cache DB schema version mismatch (db: %s, expected: %s)", row[0], self.DB_SCHEMA_VERSION
                    )
                self._db_conn.commit()
                logger.info("Cache database opened with WAL mode: %s", self._db_path)
            except sqlite3.Error as err:
                if self._db_conn is not None:
                    self._db_conn.close()
                    self._db_conn = None
                msg: str = f"Database initialization failed: {err}"
                logger.critical(msg)
                raise RuntimeError(msg) from err

    async def close(self) -> None:
        await asyncio.to_thread(self._close_sync)

    def _close_sync(self) -> None:
        with self._lock:
            if self._db_conn is None:
                return
            try:
                self._db_conn.close()
                logger.info("Database connection closed")
            except Exception as err:
                logger.error("Error closing database connection: %s", err)
            finally:
                self._db_conn = None

    async def get(self, key: str) -> str | None:
        return await asyncio.to_thread(self._get_sync, key)

    def _get_sync(self, key: str) -> str | None:
        with self._lock:
            if self._db_conn is None:
                return None
            try:
                row = self._db_conn.execute(
                    "SELECT value, expires_at FROM kv_cache WHERE cache_key = ?", (key,)
                ).fetchone()
                if row is None:
                    return None
                if int(row[1]) <= int(time.time()):
                    self._db_conn.execute("DELETE FROM kv_cache WHERE cache_key = ?", (key,))
                    self._db_conn.commit()
                    logger.debug("Persistent cache entry expired for key: %s", key[:48])
                    return None
            except sqlite3.Error as err:
                logger.error("Error reading persistent cache: %s", err)
                return None
            else:
                return row[0]

    async def set(self, key: str, value: str, ttl_seconds: float) -> bool:
        return await asyncio.to_thread(self._set_sync, key, value, ttl_seconds)

    def _set_sync(self, key: str, value: str, ttl_seconds: float) -> bool:
        with self._lock:
            if self._db_conn is None:
                return False
            now_epoch: int = int(time.time())
            try:
                self._db_conn.execute(
                    """
                    INSERT OR REPLACE INTO kv_cache (cache_key, value, created_at, expires_at)
                    VALUES (?, ?, ?, ?)
                    """,
                    (key, value, now_epoch, now_epoch + int(ttl_seconds)),
                )
                self._db_conn.commit()
            except sqlite3.Error as err:
                logger.error("Error writing persistent cache: %s", err)
                return False
            else:
                return True

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._delete_sync, key)

    def _delete_sync(self, key: str) -> None:
        with self._lock:
            if self._db_conn is None:
                return
            try:
                self._db_conn.execute("DELETE FROM kv_cache WHERE cache_key = ?", (key,))
                self._db_conn.commit()
            except sqlite3.Error as err:
                logger.error("Error deleting persistent cache entry: %s", err)

    async def cleanup_expired(self) -> int:
        """Delete every expired row. Returns the number of deleted rows."""
        return await asyncio.to_thread(self._cleanup_expired_sync)

    def _cleanup_expired_sync(self) -> int:
        with self._lock:
            if self._db_conn is None:
                return 0
            try:
                cursor: sqlite3.Cursor = self._db_conn.execute(
                    "DELETE FROM kv_cache WHERE expires_at <= ?", (int(time.time()),)
                )
                self._db_conn.commit()
            except sqlite3.Error as err:
                logger.error("Error during cache cleanup: %s", err)
                return 0
            else:
                logger.info("Deleted %d expired persistent cache entries", cursor.rowcount)
                return cursor.rowcount
