"""Models package - DDL and entities for all domains."""

from app.models.beatmaps import BEATMAP_DDL
from app.models.common import CACHE_DDL, BaseEntity, CacheEntry
from app.models.compare import (
    ComparisonResult,
    Direction,
    Metric,
    MetricSummary,
    Outcome,
    RankedEntry,
)
from app.models.players import (
    PLAYER_STATS_DDL,
    PLAYER_STATS_INDEXES,
    SKILL_TRACKING_DDL,
    SKILL_TRACKING_INDEXES,
    SKILL_TYPES,
)
from app.models.scores import TOP_SCORES_DDL, TOP_SCORES_INDEXES

ALL_DDL = [
    # Players
    PLAYER_STATS_DDL,
    SKILL_TRACKING_DDL,
    # Scores
    TOP_SCORES_DDL,
    # Beatmaps
    BEATMAP_DDL,
    # Common
    CACHE_DDL,
]

ALL_INDEXES = PLAYER_STATS_INDEXES + SKILL_TRACKING_INDEXES + TOP_SCORES_INDEXES

__all__ = [
    # Common
    "BaseEntity",
    "CACHE_DDL",
    "CacheEntry",
    # Players
    "PLAYER_STATS_DDL",
    "SKILL_TRACKING_DDL",
    "SKILL_TYPES",
    # Scores
    "TOP_SCORES_DDL",
    # Beatmaps
    "BEATMAP_DDL",
    # Compare
    "ComparisonResult",
    "Direction",
    "Metric",
    "MetricSummary",
    "Outcome",
    "RankedEntry",
    # All DDL
    "ALL_DDL",
    "ALL_INDEXES",
]
