"""Cache domains: key namespace, TTL and argument normalization per domain."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from app.cache.keys import Part
from settings import CACHE_TTLS


def _identity(parts: Sequence[Part]) -> tuple[Part, ...]:
    return tuple(parts)


def casefold_strings(parts: Sequence[Part]) -> tuple[Part, ...]:
    """Case-fold and strip string parts; order is kept."""
    return tuple(p.strip().casefold() if isinstance(p, str) else p for p in parts)


@dataclass(frozen=True)
class CacheDomain:
    """A logical query family sharing a key prefix and a TTL."""

    name: str
    ttl: int
    normalize: Callable[[Sequence[Part]], tuple[Part, ...]] = field(default=_identity)

    def __post_init__(self):
        if self.ttl <= 0:
            raise ValueError(f"TTL for {self.name} must be positive, got {self.ttl}")


def _domain(name: str, normalize=_identity) -> CacheDomain:
    return CacheDomain(name=name, ttl=CACHE_TTLS[name], normalize=normalize)


# Comparison keys keep argument order: (A, B) and (B, A) are cached separately
# because player1/player2 is part of the payload shape.
COMPARE = _domain("compare", casefold_strings)
SEARCH = _domain("search", casefold_strings)
ANALYTICS_OVERVIEW = _domain("analytics.overview")
ANALYTICS_GROWTH = _domain("analytics.growth")
ANALYTICS_PERFORMANCE = _domain("analytics.performance")
ANALYTICS_SKILLS = _domain("analytics.skills", casefold_strings)
ANALYTICS_BEATMAPS = _domain("analytics.beatmaps")
ANALYTICS_MODS = _domain("analytics.mods")
ANALYTICS_COMPARATIVE = _domain("analytics.comparative")

ALL_DOMAINS = [
    COMPARE,
    SEARCH,
    ANALYTICS_OVERVIEW,
    ANALYTICS_GROWTH,
    ANALYTICS_PERFORMANCE,
    ANALYTICS_SKILLS,
    ANALYTICS_BEATMAPS,
    ANALYTICS_MODS,
    ANALYTICS_COMPARATIVE,
]
