"""Search API."""

from web.api.search.views import (
    advanced_search,
    popular,
    search,
    search_beatmaps,
    search_players,
    stats,
    suggestions,
)

__all__ = [
    "search",
    "search_players",
    "search_beatmaps",
    "advanced_search",
    "suggestions",
    "popular",
    "stats",
]
