"""Repositories package - data access layer for our database."""

from app.repositories.analytics import AnalyticsRepository
from app.repositories.base import BaseRepository
from app.repositories.beatmaps import BeatmapRepository
from app.repositories.common import DuckDBCacheBackend, Page, PreparedQuery, QueryBuilder
from app.repositories.db import (
    close_db,
    connect_memory,
    get_db,
    init_tables,
)
from app.repositories.players import PlayerRepository
from app.repositories.scores import ScoreRepository

__all__ = [
    # DB
    "get_db",
    "close_db",
    "init_tables",
    "connect_memory",
    # Base
    "BaseRepository",
    # Common
    "DuckDBCacheBackend",
    "Page",
    "PreparedQuery",
    "QueryBuilder",
    # Domains
    "PlayerRepository",
    "ScoreRepository",
    "BeatmapRepository",
    "AnalyticsRepository",
]
