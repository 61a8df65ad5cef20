"""Search service - players, beatmaps and scores lookup."""

import asyncio
from collections.abc import Mapping
from typing import Any

from loguru import logger

from app.cache import ReadThrough, hash_params
from app.cache.domains import SEARCH
from app.errors import ValidationError
from app.repositories.analytics import AnalyticsRepository
from app.repositories.beatmaps import BeatmapRepository
from app.repositories.common.query import Page, build_filter_spec
from app.repositories.players import PLAYER_FILTERS, PlayerRepository
from app.repositories.scores import SCORE_FILTERS, ScoreRepository
from settings import DEFAULT_LIMIT, SUGGESTION_LIMIT

SEARCH_TYPES = ("all", "players", "beatmaps", "scores")
ADVANCED_TYPES = ("all", "players", "scores")
SUGGESTION_TYPES = ("all", "players", "beatmaps", "artists")


def _check_type(value: str, allowed: tuple[str, ...]) -> str:
    if value not in allowed:
        raise ValidationError(f"Invalid type: {value}. Must be one of {', '.join(allowed)}")
    return value


class SearchService:
    """Search with read-through caching of the combined search."""

    def __init__(
        self,
        players: PlayerRepository,
        scores: ScoreRepository,
        beatmaps: BeatmapRepository,
        analytics: AnalyticsRepository,
        cache: ReadThrough,
    ):
        self._players = players
        self._scores = scores
        self._beatmaps = beatmaps
        self._analytics = analytics
        self._cache = cache
        logger.debug("SearchService initialized")

    async def search(self, q: str, search_type: str = "all", limit: Any = DEFAULT_LIMIT) -> dict:
        """Players, beatmaps and/or scores matching q."""
        _check_type(search_type, SEARCH_TYPES)
        term = q.strip()
        page = Page.of(limit)

        async def compute() -> dict:
            wanted = {}
            if search_type in ("all", "players"):
                wanted["players"] = asyncio.to_thread(self._players.search, term, "pp", page)
            if search_type in ("all", "beatmaps"):
                wanted["beatmaps"] = asyncio.to_thread(self._beatmaps.search, term, "popularity", page)
            if search_type in ("all", "scores"):
                wanted["scores"] = asyncio.to_thread(self._scores.search, term, page)

            results = await asyncio.gather(*wanted.values())
            logger.info("Search {!r} ({}): {}", term, search_type, {k: len(v) for k, v in zip(wanted, results)})
            return dict(zip(wanted, results))

        data = await self._cache.get_or_compute(SEARCH, ["all", term, search_type, page.limit], compute)
        return {"query": term, "type": search_type, "results": data}

    async def search_players(self, q: str, sort_by: str = "pp", limit: Any = DEFAULT_LIMIT) -> dict:
        term = q.strip()
        page = Page.of(limit)
        data = await asyncio.to_thread(self._players.search, term, sort_by, page, True)
        return {"query": term, "results": data, "meta": {"sort_by": sort_by, "limit": page.limit, "count": len(data)}}

    async def search_beatmaps(self, q: str, sort_by: str = "popularity", limit: Any = DEFAULT_LIMIT) -> dict:
        term = q.strip()
        page = Page.of(limit)
        data = await asyncio.to_thread(self._beatmaps.search, term, sort_by, page)
        return {"query": term, "results": data, "meta": {"sort_by": sort_by, "limit": page.limit, "count": len(data)}}

    async def advanced_search(
        self,
        query: str = "",
        filters: Mapping[str, Any] | None = None,
        limit: Any = DEFAULT_LIMIT,
        offset: Any = 0,
    ) -> dict:
        """Filtered players and scores; only the filters given constrain the result."""
        filters = dict(filters or {})
        search_type = _check_type(filters.pop("type", None) or "all", ADVANCED_TYPES)
        page = Page.of(limit, offset)
        values = {**filters, "query": query}

        async def compute() -> dict:
            wanted = {}
            if search_type in ("all", "players"):
                spec = build_filter_spec(values, PLAYER_FILTERS)
                wanted["players"] = asyncio.to_thread(self._players.advanced_search, spec, page)
            if search_type in ("all", "scores"):
                spec = build_filter_spec(values, SCORE_FILTERS)
                wanted["scores"] = asyncio.to_thread(self._scores.advanced_search, spec, page)
            return dict(zip(wanted, await asyncio.gather(*wanted.values())))

        parts = ["advanced", search_type, hash_params(values), page.limit, page.offset]
        data = await self._cache.get_or_compute(SEARCH, parts, compute)
        return {"query": query, "results": data, "meta": {"limit": page.limit, "offset": page.offset}}

    async def suggestions(self, q: str, suggestion_type: str = "all", limit: Any = SUGGESTION_LIMIT) -> dict:
        """Prefix matches for autocomplete."""
        _check_type(suggestion_type, SUGGESTION_TYPES)
        prefix = q.strip()
        page = Page.of(limit)

        wanted = {}
        if suggestion_type in ("all", "players"):
            wanted["players"] = asyncio.to_thread(self._players.suggestions, prefix, page.limit)
        if suggestion_type in ("all", "beatmaps"):
            wanted["beatmaps"] = asyncio.to_thread(self._beatmaps.suggestions, prefix, page.limit)
        if suggestion_type in ("all", "artists"):
            wanted["artists"] = asyncio.to_thread(self._beatmaps.artist_suggestions, prefix, page.limit)
        return {"query": prefix, "suggestions": dict(zip(wanted, await asyncio.gather(*wanted.values())))}

    async def popular(self, limit: Any = DEFAULT_LIMIT) -> dict:
        """Top players and most played beatmaps, half the limit each."""
        half = max(Page.of(limit).limit // 2, 1)
        players, beatmaps = await asyncio.gather(
            asyncio.to_thread(self._players.top_players, half),
            asyncio.to_thread(self._beatmaps.popular, half),
        )
        return {"players": players, "beatmaps": beatmaps}

    async def stats(self) -> dict[str, int]:
        return await asyncio.to_thread(self._analytics.get_category_counts)
