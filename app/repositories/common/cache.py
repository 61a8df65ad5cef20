"""Cache repository - query cache persisted in DuckDB."""

import asyncio
import time
from collections.abc import Callable
from datetime import datetime, timezone

import duckdb
from loguru import logger

from app.repositories.base import BaseRepository


class DuckDBCacheBackend(BaseRepository):
    """Cache backend over the ``query_cache`` table.

    Expired rows are never returned; they are removed by ``purge_expired``
    or overwritten by the next write for the same key.
    """

    def __init__(self, conn: duckdb.DuckDBPyConnection | None = None, clock: Callable[[], float] = time.time):
        super().__init__(conn, read_only=False)
        self._clock = clock

    def _get(self, key: str) -> str | None:
        row = self.fetchone(
            "SELECT data FROM query_cache WHERE key = ? AND expires_at > ?",
            [key, self._clock()],
        )
        return row[0] if row else None

    def _set(self, key: str, value: str, ttl: int) -> None:
        cursor = self.execute(
            """
            INSERT OR REPLACE INTO query_cache (key, data, expires_at, computed_at)
            VALUES (?, ?, ?, ?)
            """,
            [key, value, self._clock() + ttl, datetime.now(timezone.utc).replace(tzinfo=None)],
        )
        cursor.close()

    def _delete(self, key: str) -> bool:
        row = self.fetchone("DELETE FROM query_cache WHERE key = ? RETURNING key", [key])
        return row is not None

    def _delete_prefix(self, prefix: str) -> int:
        rows = self.fetchall("DELETE FROM query_cache WHERE starts_with(key, ?) RETURNING key", [prefix])
        return len(rows)

    def purge_expired(self) -> int:
        """Delete expired rows. Returns count removed."""
        rows = self.fetchall("DELETE FROM query_cache WHERE expires_at <= ? RETURNING key", [self._clock()])
        if rows:
            logger.info("Cache purged {} expired rows", len(rows))
        return len(rows)

    async def get(self, key: str) -> str | None:
        return await asyncio.to_thread(self._get, key)

    async def set(self, key: str, value: str, ttl: int) -> None:
        await asyncio.to_thread(self._set, key, value, ttl)

    async def delete(self, key: str) -> bool:
        return await asyncio.to_thread(self._delete, key)

    async def delete_prefix(self, prefix: str) -> int:
        return await asyncio.to_thread(self._delete_prefix, prefix)

    async def close(self) -> None:
        # Connection is process-wide and owned by app.repositories.db
        logger.debug("DuckDB cache backend closed")
