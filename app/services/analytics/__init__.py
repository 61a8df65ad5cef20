"""Analytics service."""

from app.services.analytics.service import AnalyticsService, distribution

__all__ = ["AnalyticsService", "distribution"]
