"""Analytics API."""

from web.api.analytics.views import (
    activity,
    beatmaps,
    comparative,
    growth,
    mods,
    overview,
    performance_distribution,
    skills,
    timeline,
)

__all__ = [
    "overview",
    "growth",
    "performance_distribution",
    "activity",
    "skills",
    "beatmaps",
    "mods",
    "timeline",
    "comparative",
]
