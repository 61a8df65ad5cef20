"""Analytics API views - thin layer over services."""

from typing import Any

from app.container import container
from web.api.errors import guarded, validate_int


@guarded
async def overview() -> dict:
    return await container.analytics.overview()


@guarded
async def growth(period: str = "month") -> dict:
    return await container.analytics.growth(period)


@guarded
async def performance_distribution() -> dict:
    return await container.analytics.performance_distribution()


@guarded
async def activity(days: Any = 30) -> dict:
    return await container.analytics.activity(validate_int(days, "days", minimum=1))


@guarded
async def skills(skill_type: str | None = None) -> dict:
    return await container.analytics.skills(skill_type or None)


@guarded
async def beatmaps(sort_by: str = "popularity", limit: Any = 50) -> dict:
    return await container.analytics.beatmaps(sort_by, limit)


@guarded
async def mods() -> dict:
    return await container.analytics.mods()


@guarded
async def timeline(period: str = "week", group_by: str = "day") -> dict:
    return await container.analytics.timeline(period, group_by)


@guarded
async def comparative() -> dict:
    return await container.analytics.comparative()
