"""DuckDB connection management.

One process-wide connection; repositories run every query on their own
``cursor()`` so concurrent sub-fetches from worker threads never share a
cursor.
"""

import threading
from pathlib import Path

import duckdb
from loguru import logger

from app.models import ALL_DDL, ALL_INDEXES
from settings import DB_PATH

_lock = threading.Lock()
_conn: duckdb.DuckDBPyConnection | None = None


def db_exists() -> bool:
    """Check if database file exists."""
    return Path(DB_PATH).exists()


def _tables_exist(conn: duckdb.DuckDBPyConnection) -> bool:
    """Check if main tables already exist."""
    try:
        result = conn.execute(
            "SELECT COUNT(*) FROM information_schema.tables WHERE table_name = 'player_stats'"
        ).fetchone()
        return result[0] > 0
    except duckdb.Error:
        return False


def init_tables(conn: duckdb.DuckDBPyConnection) -> None:
    """Initialize all tables from DDL statements (idempotent - uses IF NOT EXISTS)."""
    if _tables_exist(conn):
        return

    for ddl in ALL_DDL + ALL_INDEXES:
        conn.execute(ddl)
    logger.info("DB tables initialized")


def _ensure_db_exists() -> None:
    """Create DB with tables if it doesn't exist."""
    if not db_exists():
        logger.warning("DB not found: {}. Creating empty DB.", DB_PATH)
        conn = duckdb.connect(DB_PATH)
        init_tables(conn)
        conn.close()


def get_db(read_only: bool = True) -> duckdb.DuckDBPyConnection:
    """Get the process-wide connection."""
    global _conn
    with _lock:
        if _conn is None:
            _ensure_db_exists()
            _conn = duckdb.connect(DB_PATH, read_only=read_only)
            logger.debug("DB connected: {} (read_only={})", DB_PATH, read_only)
        return _conn


def close_db() -> None:
    """Close the process-wide connection."""
    global _conn
    with _lock:
        if _conn is not None:
            _conn.close()
            _conn = None
            logger.debug("DB connection closed")


def connect_memory() -> duckdb.DuckDBPyConnection:
    """In-memory database with all tables (local runs and tests)."""
    conn = duckdb.connect(":memory:")
    init_tables(conn)
    return conn
