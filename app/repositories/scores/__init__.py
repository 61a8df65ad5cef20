"""Score repositories."""

from app.repositories.scores.score import SCORE_FILTERS, SCORE_SORTS, ScoreRepository

__all__ = ["SCORE_FILTERS", "SCORE_SORTS", "ScoreRepository"]
