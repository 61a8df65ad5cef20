"""Base repository class."""

import threading
from datetime import date, datetime
from decimal import Decimal
from typing import Any

import duckdb
from loguru import logger
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from app.errors import StorageError
from app.repositories.db import get_db

_cursor_lock = threading.Lock()


def _plain(value: Any) -> Any:
    """JSON-ready scalar, so fresh and cached records look the same."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


class BaseRepository:
    """Base repository with common functionality.

    All values reach DuckDB through bound parameters; query text is always
    a constant template or the output of ``QueryBuilder``.
    """

    def __init__(self, conn: duckdb.DuckDBPyConnection | None = None, read_only: bool = True):
        self._db = conn if conn is not None else get_db(read_only)
        logger.debug("{} initialized", self.__class__.__name__)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(duckdb.IOException),
        reraise=True,
    )
    def _run(self, query: str, params: list | None) -> duckdb.DuckDBPyConnection:
        with _cursor_lock:
            cursor = self._db.cursor()
        if params:
            return cursor.execute(query, params)
        return cursor.execute(query)

    def execute(self, query: str, params: list | None = None) -> Any:
        """Execute SQL query."""
        try:
            return self._run(query, params)
        except duckdb.Error as e:
            logger.error("Query failed: {} | {}", e, " ".join(query.split()))
            raise StorageError() from e

    def fetchall(self, query: str, params: list | None = None) -> list:
        """Execute and fetch all rows."""
        cursor = self.execute(query, params)
        try:
            return cursor.fetchall()
        finally:
            cursor.close()

    def fetchone(self, query: str, params: list | None = None) -> Any:
        """Execute and fetch one row."""
        cursor = self.execute(query, params)
        try:
            return cursor.fetchone()
        finally:
            cursor.close()

    def fetch_records(self, query: str, params: list | None = None) -> list[dict]:
        """Execute and fetch all rows as column -> value mappings."""
        cursor = self.execute(query, params)
        try:
            columns = [d[0] for d in cursor.description]
            return [{c: _plain(v) for c, v in zip(columns, row)} for row in cursor.fetchall()]
        finally:
            cursor.close()

    def fetch_record(self, query: str, params: list | None = None) -> dict | None:
        """Execute and fetch the first row as a mapping, or None."""
        records = self.fetch_records(query, params)
        return records[0] if records else None

    def fetch_prepared(self, prepared) -> list[dict]:
        """Execute a built ``PreparedQuery``."""
        return self.fetch_records(prepared.sql, prepared.params)
