"""Analytics service - leaderboard aggregates and distributions."""

import asyncio
import time
from collections.abc import Callable

import numpy as np
from loguru import logger

from app.cache import ReadThrough
from app.cache.domains import (
    ANALYTICS_BEATMAPS,
    ANALYTICS_COMPARATIVE,
    ANALYTICS_GROWTH,
    ANALYTICS_MODS,
    ANALYTICS_OVERVIEW,
    ANALYTICS_PERFORMANCE,
    ANALYTICS_SKILLS,
)
from app.errors import ValidationError
from app.models.players import SKILL_TYPES
from app.repositories.analytics import TIME_BUCKETS, AnalyticsRepository
from app.repositories.common.query import Page
from app.repositories.players import PlayerRepository

DAY_MS = 24 * 60 * 60 * 1000

# period -> (days back, bucket)
GROWTH_PERIODS = {"week": (7, "day"), "month": (30, "day"), "year": (365, "month")}
TIMELINE_PERIODS = {"day": 1, "week": 7, "month": 30, "quarter": 90, "year": 365}
PERCENTILES = [10, 25, 50, 75, 90, 95, 99]
HISTOGRAM_BINS = 10
MAX_ACTIVITY_DAYS = 365


def distribution(values: list[float]) -> dict:
    """Summary statistics, percentiles and histogram of values."""
    if not values:
        return {"count": 0, "mean": None, "std": None, "min": None, "max": None, "percentiles": {}, "histogram": []}

    arr = np.asarray(values, dtype=float)
    counts, edges = np.histogram(arr, bins=HISTOGRAM_BINS)
    return {
        "count": int(arr.size),
        "mean": round(float(arr.mean()), 2),
        "std": round(float(arr.std()), 2),
        "min": round(float(arr.min()), 2),
        "max": round(float(arr.max()), 2),
        "percentiles": {f"p{p}": round(float(v), 2) for p, v in zip(PERCENTILES, np.percentile(arr, PERCENTILES))},
        "histogram": [
            {"from": round(float(edges[i]), 2), "to": round(float(edges[i + 1]), 2), "count": int(c)}
            for i, c in enumerate(counts)
        ],
    }


class AnalyticsService:
    """Analytics with per-domain read-through caching."""

    def __init__(
        self,
        analytics: AnalyticsRepository,
        players: PlayerRepository,
        cache: ReadThrough,
        clock: Callable[[], float] = time.time,
    ):
        self._analytics = analytics
        self._players = players
        self._cache = cache
        self._clock = clock
        logger.debug("AnalyticsService initialized")

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    async def overview(self) -> dict:
        """Totals, 24h activity, top performers, skills, mods and difficulty spread."""

        async def compute() -> dict:
            totals, active_24h, top, skills, mods, difficulty = await asyncio.gather(
                asyncio.to_thread(self._analytics.get_totals),
                asyncio.to_thread(self._analytics.count_scores_since, self._now_ms() - DAY_MS),
                asyncio.to_thread(self._players.top_players, 5),
                asyncio.to_thread(self._analytics.get_skill_statistics),
                asyncio.to_thread(self._analytics.get_mod_usage, 10),
                asyncio.to_thread(self._analytics.get_difficulty_distribution),
            )
            return {
                "total_stats": {**totals, "active_24h": active_24h},
                "top_performers": top,
                "skill_distribution": skills,
                "mod_usage": mods,
                "difficulty_distribution": difficulty,
            }

        return await self._cache.get_or_compute(ANALYTICS_OVERVIEW, ["overview"], compute)

    async def growth(self, period: str = "month") -> dict:
        """New players per bucket and the running total over the period."""
        if period not in GROWTH_PERIODS:
            raise ValidationError(f"Invalid period: {period}. Must be one of {', '.join(GROWTH_PERIODS)}")
        days, bucket = GROWTH_PERIODS[period]

        async def compute() -> dict:
            since = self._now_ms() - days * DAY_MS
            rows, baseline = await asyncio.gather(
                asyncio.to_thread(self._analytics.get_new_players, since, bucket),
                asyncio.to_thread(self._analytics.count_players_before, since),
            )
            total = baseline
            series = []
            for row in rows:
                total += row["new_players"]
                series.append({**row, "total_players": total})
            return {"period": period, "bucket": bucket, "starting_players": baseline, "series": series}

        return await self._cache.get_or_compute(ANALYTICS_GROWTH, [period], compute)

    async def performance_distribution(self) -> dict:
        """pp spread of active players and of all scores."""

        async def compute() -> dict:
            values = await asyncio.to_thread(self._analytics.get_pp_values)
            return {"player_pp": distribution(values["players"]), "score_pp": distribution(values["scores"])}

        return await self._cache.get_or_compute(ANALYTICS_PERFORMANCE, ["distribution"], compute)

    async def activity(self, days: int = 30) -> dict:
        """Daily score activity over the last days (not cached)."""
        if isinstance(days, bool) or not isinstance(days, int) or not 1 <= days <= MAX_ACTIVITY_DAYS:
            raise ValidationError(f"days must be between 1 and {MAX_ACTIVITY_DAYS}")
        rows = await asyncio.to_thread(self._analytics.get_timeline, self._now_ms() - days * DAY_MS, "day")
        return {"days": days, "series": rows}

    async def skills(self, skill_type: str | None = None) -> dict:
        """Range distribution of one skill, or statistics for all skills."""
        if skill_type is not None:
            skill_type = skill_type.strip().lower()
            if skill_type not in SKILL_TYPES:
                raise ValidationError(f"Invalid skill type: {skill_type}. Must be one of {', '.join(SKILL_TYPES)}")

        async def compute() -> dict:
            if skill_type:
                rows = await asyncio.to_thread(self._analytics.get_skill_distribution, skill_type)
            else:
                rows = await asyncio.to_thread(self._analytics.get_skill_statistics)
            return {"skill_type": skill_type, "items": rows}

        return await self._cache.get_or_compute(ANALYTICS_SKILLS, [skill_type or "all"], compute)

    async def beatmaps(self, sort_by: str = "popularity", limit=50) -> dict:
        page = Page.of(limit)

        async def compute() -> dict:
            rows = await asyncio.to_thread(self._analytics.get_beatmap_popularity, sort_by, page.limit)
            return {"sort_by": sort_by, "items": rows}

        return await self._cache.get_or_compute(ANALYTICS_BEATMAPS, [sort_by, page.limit], compute)

    async def mods(self) -> dict:
        """Per-mod usage with share of all scores."""

        async def compute() -> dict:
            stats, total = await asyncio.gather(
                asyncio.to_thread(self._analytics.get_mod_usage),
                asyncio.to_thread(self._analytics.count_scores),
            )
            return {
                "mod_stats": [
                    {**m, "usage_percentage": round(m["usage_count"] / total * 100, 2) if total else 0.0} for m in stats
                ],
                "total_scores": total,
            }

        return await self._cache.get_or_compute(ANALYTICS_MODS, ["usage"], compute)

    async def timeline(self, period: str = "week", group_by: str = "day") -> dict:
        """Score activity per bucket over a period (not cached)."""
        if period not in TIMELINE_PERIODS:
            raise ValidationError(f"Invalid period: {period}. Must be one of {', '.join(TIMELINE_PERIODS)}")
        if group_by not in TIME_BUCKETS:
            raise ValidationError(f"Invalid group_by: {group_by}. Must be one of {', '.join(TIME_BUCKETS)}")

        since = self._now_ms() - TIMELINE_PERIODS[period] * DAY_MS
        rows = await asyncio.to_thread(self._analytics.get_timeline, since, group_by)
        return {"period": period, "group_by": group_by, "series": rows}

    async def comparative(self) -> dict:
        """Overall stats with difficulty and grade breakdowns."""

        async def compute() -> dict:
            overall, difficulty, accuracy = await asyncio.gather(
                asyncio.to_thread(self._analytics.get_overall_stats),
                asyncio.to_thread(self._analytics.get_difficulty_breakdown),
                asyncio.to_thread(self._analytics.get_accuracy_breakdown),
            )
            return {"overall_stats": overall, "difficulty_breakdown": difficulty, "accuracy_breakdown": accuracy}

        return await self._cache.get_or_compute(ANALYTICS_COMPARATIVE, ["breakdown"], compute)
