"""Persistent cache on the local filesystem, stored in a SQLite file.

SQLite calls run in a worker thread; one connection is shared behind a lock.
"""

from __future__ import annotations

import asyncio
import sqlite3
import threading
import time
from collections.abc import Callable
from typing import Any, TypeVar

from codefetch.cache.base import CacheBackend, CacheOptions, default_cache_dir
from codefetch.exceptions import CacheError

CACHE_DB_FILE = "cache.db"

T = TypeVar("T")


class FileSystemCache(CacheBackend):
    """Cache backed by ``<cache_dir>/cache.db``."""

    def __init__(
        self,
        options: CacheOptions | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(options)
        self._clock = clock
        self.db_path = (self.options.cache_dir or default_cache_dir()) / CACHE_DB_FILE
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS entries (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    expires_at REAL,            -- unix time, NULL = never
                    accessed_at REAL NOT NULL
                )
            """)
            self._conn.commit()
        return self._conn

    async def _run(self, fn: Callable[..., T], *args: Any) -> T:
        def _locked() -> T:
            with self._lock:
                try:
                    return fn(self._get_conn(), *args)
                except (sqlite3.Error, OSError) as e:
                    raise CacheError(f"Cache database error ({self.db_path}): {e}") from e

        return await asyncio.to_thread(_locked)

    async def get(self, key: str) -> str | None:
        return await self._run(self._get, key)

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        await self._run(self._set, key, value, self._ttl(ttl))

    async def delete(self, key: str) -> None:
        await self._run(self._delete, key)

    async def clear(self) -> None:
        await self._run(self._clear)

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    # -- synchronous helpers, always called with the lock held --

    def _get(self, conn: sqlite3.Connection, key: str) -> str | None:
        now = self._clock()
        row = conn.execute(
            "SELECT value, expires_at FROM entries WHERE key = ?", (key,)
        ).fetchone()
        if row is None:
            return None
        value, expires_at = row
        if expires_at is not None and expires_at <= now:
            conn.execute("DELETE FROM entries WHERE key = ?", (key,))
            conn.commit()
            return None
        conn.execute("UPDATE entries SET accessed_at = ? WHERE key = ?", (now, key))
        conn.commit()
        return value

    def _set(self, conn: sqlite3.Connection, key: str, value: str, ttl: int | None) -> None:
        now = self._clock()
        expires_at = now + ttl if ttl else None
        conn.execute(
            "INSERT OR REPLACE INTO entries (key, value, expires_at, accessed_at) "
            "VALUES (?, ?, ?, ?)",
            (key, value, expires_at, now),
        )
        # Evict least recently used beyond max_entries
        conn.execute(
            "DELETE FROM entries WHERE key NOT IN "
            "(SELECT key FROM entries ORDER BY accessed_at DESC, rowid DESC LIMIT ?)",
            (self.options.max_entries,),
        )
        conn.commit()

    @staticmethod
    def _delete(conn: sqlite3.Connection, key: str) -> None:
        conn.execute("DELETE FROM entries WHERE key = ?", (key,))
        conn.commit()

    @staticmethod
    def _clear(conn: sqlite3.Connection) -> None:
        conn.execute("DELETE FROM entries")
        conn.commit()

