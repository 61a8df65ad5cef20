"""Dependency Injection container - initialized at app startup."""

import duckdb
from loguru import logger

from app.cache import CacheStore, MemoryCacheBackend, ReadThrough
from app.cache.redis_backend import RedisCacheBackend
from app.cache.store import CacheBackend
from app.repositories.analytics import AnalyticsRepository
from app.repositories.beatmaps import BeatmapRepository
from app.repositories.common import DuckDBCacheBackend
from app.repositories.db import close_db, get_db
from app.repositories.players import PlayerRepository
from app.repositories.scores import ScoreRepository
from app.services.analytics import AnalyticsService
from app.services.compare import CompareService
from app.services.search import SearchService
from settings import CACHE_BACKEND, CACHE_NAMESPACE
from settings.logging import setup_logging


def build_backend(kind: str, conn: duckdb.DuckDBPyConnection | None = None) -> CacheBackend:
    """Cache backend by name: memory, duckdb or redis."""
    if kind == "memory":
        return MemoryCacheBackend()
    if kind == "duckdb":
        return DuckDBCacheBackend(conn)
    if kind == "redis":
        return RedisCacheBackend()
    raise ValueError(f"Unknown cache backend: {kind}")


class Container:
    """Application DI container - holds all singleton instances."""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def init(
        self,
        conn: duckdb.DuckDBPyConnection | None = None,
        backend: CacheBackend | None = None,
    ) -> None:
        """Initialize all dependencies. Call once at app startup."""
        if self._initialized:
            return

        setup_logging()

        # The DuckDB cache writes through the shared connection
        if conn is None and backend is None and CACHE_BACKEND == "duckdb":
            conn = get_db(read_only=False)

        # Cache (one store per process, injected everywhere)
        self.cache_store = CacheStore(backend or build_backend(CACHE_BACKEND, conn), namespace=CACHE_NAMESPACE)
        self.read_through = ReadThrough(self.cache_store)

        # Repositories (singletons)
        self._player_repo = PlayerRepository(conn)
        self._score_repo = ScoreRepository(conn)
        self._beatmap_repo = BeatmapRepository(conn)
        self._analytics_repo = AnalyticsRepository(conn)

        # Services (with injected repos)
        self.compare = CompareService(
            players=self._player_repo,
            scores=self._score_repo,
            beatmaps=self._beatmap_repo,
            cache=self.read_through,
        )

        self.search = SearchService(
            players=self._player_repo,
            scores=self._score_repo,
            beatmaps=self._beatmap_repo,
            analytics=self._analytics_repo,
            cache=self.read_through,
        )

        self.analytics = AnalyticsService(
            analytics=self._analytics_repo,
            players=self._player_repo,
            cache=self.read_through,
        )

        self._initialized = True
        logger.info("Container initialized (cache backend: {})", self.cache_store.stats()["backend"])

    async def close(self) -> None:
        """Flush pending cache writes and release the cache and DB."""
        if not self._initialized:
            return
        await self.read_through.drain()
        await self.cache_store.close()
        close_db()
        self._initialized = False
        logger.info("Container closed")


# Global container instance
container = Container()
