"""Search service."""

from app.services.search.service import SearchService

__all__ = ["SearchService"]
