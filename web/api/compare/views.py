"""Compare API views - thin layer over services."""

from typing import Any

from app.container import container
from app.services.compare.engine import check_entity_count
from web.api.errors import guarded, parse_body, validate_int, validate_username

from .schemas import MultipleCompareRequest


@guarded
async def compare_players(username1: str, username2: str) -> dict:
    """Two players side by side."""
    username1 = validate_username(username1, "username1")
    username2 = validate_username(username2, "username2")
    return await container.compare.compare_players(username1, username2)


@guarded
async def compare_on_beatmap(username1: str, username2: str, beatmap_id: Any) -> dict:
    """Two players on one beatmap."""
    username1 = validate_username(username1, "username1")
    username2 = validate_username(username2, "username2")
    beatmap_id = validate_int(beatmap_id, "beatmap_id", minimum=1)
    return await container.compare.compare_on_beatmap(username1, username2, beatmap_id)


@guarded
async def compare_multiple(body: dict | None) -> dict:
    """Ranking of 2-5 players on the requested metrics."""
    request = parse_body(MultipleCompareRequest, body)
    check_entity_count(len(request.usernames))
    usernames = [validate_username(u) for u in request.usernames]
    return await container.compare.compare_multiple(usernames, request.metrics)


@guarded
async def head_to_head(username1: str, username2: str, limit: Any = 20) -> dict:
    """Common beatmaps of two players with per-beatmap winners."""
    username1 = validate_username(username1, "username1")
    username2 = validate_username(username2, "username2")
    return await container.compare.head_to_head(username1, username2, limit)
