"""Aggregation and comparison engine.

Pure functions over fetched entity records (flat metric name -> value
mappings). Missing values are substituted per metric before anything is
ranked or aggregated, so rank metrics never favor absent data.
"""

from collections.abc import Mapping, Sequence
from enum import Enum

from app.errors import ValidationError
from app.models.compare import ComparisonResult, Direction, Metric, MetricSummary, Outcome, RankedEntry
from settings import COMPARE_MAX_ENTITIES, COMPARE_MIN_ENTITIES, RANK_TIE_POLICY


class TiePolicy(str, Enum):
    """Dense: equal values share a rank (1, 1, 2). Positional: 1, 2, 3 in input order."""

    DENSE = "dense"
    POSITIONAL = "positional"


def check_entity_count(count: int, max_entities: int = COMPARE_MAX_ENTITIES) -> None:
    """Raise ValidationError unless 2 <= count <= max_entities."""
    if not COMPARE_MIN_ENTITIES <= count <= max(max_entities, COMPARE_MIN_ENTITIES):
        raise ValidationError(f"Please provide between {COMPARE_MIN_ENTITIES} and {max_entities} entities")


def metric_value(entity: Mapping, metric: Metric) -> float:
    """Raw value with the metric's missing default substituted."""
    raw = entity.get(metric.name)
    return float(metric.missing if raw is None else raw)


def _better(a: float, b: float, direction: Direction) -> bool:
    return a > b if direction is Direction.HIGHER else a < b


def rank(
    entities: Sequence[Mapping],
    metric: Metric,
    id_key: str = "username",
    tie_policy: TiePolicy | str = RANK_TIE_POLICY,
) -> list[RankedEntry]:
    """Stable ordering of entities under metric, rank 1 = best."""
    tie_policy = TiePolicy(tie_policy)
    values = [(str(e.get(id_key)), metric_value(e, metric)) for e in entities]
    ordered = sorted(values, key=lambda pair: pair[1], reverse=metric.direction is Direction.HIGHER)

    ranked = []
    current = 0
    for position, (entity_id, value) in enumerate(ordered, start=1):
        if tie_policy is TiePolicy.POSITIONAL:
            current = position
        elif not ranked or value != ranked[-1].value:
            current += 1
        ranked.append(RankedEntry(entity_id=entity_id, value=value, rank=current))
    return ranked


def summarize(values: Sequence[float], metric: Metric) -> MetricSummary:
    """Best, worst and average over substituted raw values."""
    if not values:
        raise ValueError(f"No values for metric {metric.name}")
    high, low = max(values), min(values)
    best, worst = (high, low) if metric.direction is Direction.HIGHER else (low, high)
    return MetricSummary(best=best, worst=worst, average=sum(values) / len(values))


def differential(a: Mapping, b: Mapping, metric: Metric) -> float:
    """Signed difference where positive always means a is better."""
    va, vb = metric_value(a, metric), metric_value(b, metric)
    return va - vb if metric.direction is Direction.HIGHER else vb - va


def decide_winner(a: float | None, b: float | None, direction: Direction = Direction.LOWER) -> Outcome:
    """Winner on one shared item. Equal values tie; a single present value wins."""
    if a is None and b is None:
        raise ValueError("At least one value is required")
    if b is None:
        return Outcome.PLAYER1
    if a is None:
        return Outcome.PLAYER2
    if a == b:
        return Outcome.TIE
    return Outcome.PLAYER1 if _better(a, b, direction) else Outcome.PLAYER2


def side_by_side(a: Mapping, b: Mapping, metrics: Sequence[Metric]) -> dict[str, dict]:
    """Per metric: both values and the signed differential."""
    return {
        m.name: {
            "player1": metric_value(a, m),
            "player2": metric_value(b, m),
            "difference": differential(a, b, m),
        }
        for m in metrics
    }


def compare(
    entities: Sequence[Mapping],
    metrics: Sequence[Metric],
    id_key: str = "username",
    tie_policy: TiePolicy | str = RANK_TIE_POLICY,
    max_entities: int = COMPARE_MAX_ENTITIES,
) -> ComparisonResult:
    """Summaries and rankings for every metric; differentials for exactly two entities."""
    check_entity_count(len(entities), max_entities)
    if not metrics:
        raise ValidationError("At least one metric is required")

    summaries = {}
    rankings = {}
    for metric in metrics:
        summaries[metric.name] = summarize([metric_value(e, metric) for e in entities], metric)
        rankings[metric.name] = rank(entities, metric, id_key, tie_policy)

    differentials = None
    if len(entities) == 2:
        differentials = {m.name: differential(entities[0], entities[1], m) for m in metrics}

    return ComparisonResult(
        entity_ids=[str(e.get(id_key)) for e in entities],
        metrics=summaries,
        rankings=rankings,
        differentials=differentials,
    )
