"""Score domain models."""

from app.models.scores.score import TOP_SCORES_DDL, TOP_SCORES_INDEXES

__all__ = [
    "TOP_SCORES_DDL",
    "TOP_SCORES_INDEXES",
]
