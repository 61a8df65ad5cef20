"""Analytics repositories."""

from app.repositories.analytics.analytics import POPULARITY_SORTS, TIME_BUCKETS, AnalyticsRepository

__all__ = ["POPULARITY_SORTS", "TIME_BUCKETS", "AnalyticsRepository"]
