"""Services package - service class exports."""

from app.services.analytics import AnalyticsService
from app.services.compare import CompareService
from app.services.search import SearchService

__all__ = [
    "AnalyticsService",
    "CompareService",
    "SearchService",
]
