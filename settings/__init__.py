"""Application settings."""

import os
from pathlib import Path


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


# Database
DB_PATH = os.getenv("OSU_DB_PATH", "osu.duckdb")

# Logging
LOG_DIR = Path(os.getenv("OSU_LOG_DIR", "logs"))
LOG_LEVEL = os.getenv("OSU_LOG_LEVEL", "INFO")
LOG_TO_FILE = os.getenv("OSU_LOG_TO_FILE", "false").lower() in ("1", "true", "yes")

# Cache
CACHE_BACKEND = os.getenv("CACHE_BACKEND", "memory")
CACHE_NAMESPACE = os.getenv("CACHE_NAMESPACE", "osu")
CACHE_MAX_ENTRIES = _env_int("CACHE_MAX_ENTRIES", 10_000)
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# Seconds; override one with CACHE_TTL_<DOMAIN>, e.g. CACHE_TTL_ANALYTICS_MODS=7200
_DEFAULT_TTLS = {
    "compare": 600,
    "search": 600,
    "analytics.overview": 900,
    "analytics.growth": 1800,
    "analytics.performance": 3600,
    "analytics.skills": 1800,
    "analytics.beatmaps": 1800,
    "analytics.mods": 3600,
    "analytics.comparative": 3600,
}

CACHE_TTLS = {
    domain: _env_int("CACHE_TTL_" + domain.upper().replace(".", "_"), ttl) for domain, ttl in _DEFAULT_TTLS.items()
}

# Queries
DEFAULT_LIMIT = 20
MAX_LIMIT = _env_int("MAX_LIMIT", 100)
SUGGESTION_LIMIT = 10
TOP_SCORES_LIMIT = 10
HEAD_TO_HEAD_LIMIT = 20

# Comparison
COMPARE_MIN_ENTITIES = 2
COMPARE_MAX_ENTITIES = max(COMPARE_MIN_ENTITIES, _env_int("COMPARE_MAX_ENTITIES", 5))
RANK_TIE_POLICY = os.getenv("RANK_TIE_POLICY", "dense")
WORST_RANK_SENTINEL = 999_999
