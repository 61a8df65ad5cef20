"""Cache package - key codec, cache store and read-through orchestration."""

from app.cache.domains import CacheDomain
from app.cache.keys import domain_prefix, hash_params, make_key
from app.cache.read_through import ReadThrough
from app.cache.store import CacheStore, MemoryCacheBackend

__all__ = [
    # Keys
    "make_key",
    "domain_prefix",
    "hash_params",
    # Store
    "CacheStore",
    "MemoryCacheBackend",
    # Orchestration
    "CacheDomain",
    "ReadThrough",
]
