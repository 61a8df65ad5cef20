"""Search API views - thin layer over services."""

from typing import Any

from app.container import container
from settings import DEFAULT_LIMIT, SUGGESTION_LIMIT
from web.api.errors import guarded, parse_body, validate_query

from .schemas import AdvancedSearchRequest


@guarded
async def search(q: str, type: str = "all", limit: Any = DEFAULT_LIMIT) -> dict:
    """Combined search across players, beatmaps and scores."""
    return await container.search.search(validate_query(q), type, limit)


@guarded
async def search_players(q: str, sort_by: str = "pp", limit: Any = DEFAULT_LIMIT) -> dict:
    return await container.search.search_players(validate_query(q), sort_by, limit)


@guarded
async def search_beatmaps(q: str, sort_by: str = "popularity", limit: Any = DEFAULT_LIMIT) -> dict:
    return await container.search.search_beatmaps(validate_query(q), sort_by, limit)


@guarded
async def advanced_search(body: dict | None) -> dict:
    """Filtered search; only given filters constrain results."""
    request = parse_body(AdvancedSearchRequest, body)
    filters = request.filters.model_dump(exclude_none=True)
    return await container.search.advanced_search(request.query.strip(), filters, request.limit, request.offset)


@guarded
async def suggestions(q: str, type: str = "all", limit: Any = SUGGESTION_LIMIT) -> dict:
    """Autocomplete by prefix."""
    return await container.search.suggestions(validate_query(q, min_length=1), type, limit)


@guarded
async def popular(limit: Any = DEFAULT_LIMIT) -> dict:
    return await container.search.popular(limit)


@guarded
async def stats() -> dict:
    return await container.search.stats()
