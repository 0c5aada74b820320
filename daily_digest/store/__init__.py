"""Persisted fetch and daily-summary caches."""

from daily_digest.store.cache import CacheStore
from daily_digest.store.hash import compute_materials_fingerprint, sha256_hex
from daily_digest.store.models import (
    CACHE_VERSION,
    DailyCacheEntry,
    DigestCache,
    FetchCacheEntry,
)


__all__ = [
    "CACHE_VERSION",
    "CacheStore",
    "DailyCacheEntry",
    "DigestCache",
    "FetchCacheEntry",
    "compute_materials_fingerprint",
    "sha256_hex",
]
