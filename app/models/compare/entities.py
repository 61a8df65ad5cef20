"""Comparison domain entities - computed ranking and comparison results."""

from dataclasses import dataclass, field
from enum import Enum

from app.models.common import BaseEntity


class Direction(str, Enum):
    """Which raw value wins under a metric."""

    HIGHER = "higher"
    LOWER = "lower"


class Outcome(str, Enum):
    """Winner of a two-entity comparison on a single shared item."""

    PLAYER1 = "player1"
    PLAYER2 = "player2"
    TIE = "tie"


@dataclass(frozen=True)
class Metric:
    """A named metric with its ranking direction and missing-value default."""

    name: str
    direction: Direction = Direction.HIGHER
    missing: float = 0


@dataclass
class MetricSummary(BaseEntity):
    """Best, worst and average raw value of one metric."""

    best: float
    worst: float
    average: float


@dataclass
class RankedEntry(BaseEntity):
    """One entity's position under one metric (rank 1 is best)."""

    entity_id: str
    value: float
    rank: int


@dataclass
class ComparisonResult(BaseEntity):
    """Per-metric summaries and rankings across 2..N entities."""

    entity_ids: list[str]
    metrics: dict[str, MetricSummary]
    rankings: dict[str, list[RankedEntry]]
    differentials: dict[str, float] | None = field(default=None)
