"""Player domain models - player stats and skill tracking."""

from app.models.players.player import PLAYER_STATS_DDL, PLAYER_STATS_INDEXES
from app.models.players.skill import SKILL_TRACKING_DDL, SKILL_TRACKING_INDEXES, SKILL_TYPES

__all__ = [
    "PLAYER_STATS_DDL",
    "PLAYER_STATS_INDEXES",
    "SKILL_TRACKING_DDL",
    "SKILL_TRACKING_INDEXES",
    "SKILL_TYPES",
]
