"""Known comparison metrics and their missing-value defaults."""

from collections.abc import Sequence

from app.errors import ValidationError
from app.models.compare import Direction, Metric
from app.models.players import SKILL_TYPES
from settings import WORST_RANK_SENTINEL

# Ranks: lower is better, absent sorts last
COUNTRY_RANK = Metric("country_rank", Direction.LOWER, WORST_RANK_SENTINEL)
AVG_RANK = Metric("avg_rank", Direction.LOWER, WORST_RANK_SENTINEL)

PLAYER_METRICS = {
    m.name: m
    for m in [
        Metric("total_pp"),
        Metric("weighted_pp"),
        Metric("accuracy_avg"),
        Metric("first_places"),
        Metric("total_scores"),
        AVG_RANK,
        COUNTRY_RANK,
    ]
}

DEFAULT_METRICS = ["weighted_pp", "accuracy_avg", "first_places"]

STAT_METRICS = [PLAYER_METRICS[n] for n in ("total_pp", "weighted_pp", "accuracy_avg", "first_places", "total_scores")] + [
    COUNTRY_RANK
]

SKILL_METRICS = [Metric(s) for s in SKILL_TYPES]

SCORE_METRICS = [
    Metric("rank", Direction.LOWER, WORST_RANK_SENTINEL),
    Metric("score"),
    Metric("accuracy"),
    Metric("pp"),
    Metric("max_combo"),
]


def resolve_metrics(names: Sequence[str] | None) -> list[Metric]:
    """Metrics by name, in request order, duplicates dropped."""
    if not names:
        names = DEFAULT_METRICS
    unknown = [n for n in names if n not in PLAYER_METRICS]
    if unknown:
        raise ValidationError(f"Unknown metrics: {', '.join(unknown)}")
    return [PLAYER_METRICS[n] for n in dict.fromkeys(names)]
