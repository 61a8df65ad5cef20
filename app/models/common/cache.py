"""Query cache table and entry - shared across all domains."""

from dataclasses import dataclass

from app.models.common.base import BaseEntity

CACHE_DDL = """
CREATE TABLE IF NOT EXISTS query_cache (
    key VARCHAR PRIMARY KEY,
    data JSON NOT NULL,
    expires_at DOUBLE NOT NULL,
    computed_at TIMESTAMP NOT NULL
)
"""


@dataclass
class CacheEntry(BaseEntity):
    """Serialized payload with an absolute expiry (epoch seconds)."""

    key: str
    value: str
    expires_at: float

    def is_live(self, now: float) -> bool:
        """Entries are served strictly before their expiry."""
        return now < self.expires_at
