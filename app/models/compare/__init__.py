"""Comparison domain models."""

from app.models.compare.entities import (
    ComparisonResult,
    Direction,
    Metric,
    MetricSummary,
    Outcome,
    RankedEntry,
)

__all__ = [
    "ComparisonResult",
    "Direction",
    "Metric",
    "MetricSummary",
    "Outcome",
    "RankedEntry",
]
