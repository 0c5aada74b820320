"""Persisted cache records."""

from datetime import date, timedelta
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from daily_digest.llm.models import DailySummary


CACHE_VERSION: Final[int] = 2


class _CacheModel(BaseModel):
    """Frozen base for cache records; ``saved_at`` is stored as ``at``."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class FetchCacheEntry(_CacheModel):
    """Extracted title and text of one link."""

    title: str = ""
    text: str = ""
    saved_at: str | None = Field(default=None, alias="at")


class DailyCacheEntry(_CacheModel):
    """Summary generated for one run date and the fingerprint it covers."""

    fingerprint: str
    daily: DailySummary
    saved_at: str | None = Field(default=None, alias="at")


def _is_expired(saved_at: str | None, cutoff: date) -> bool:
    """Entries without a readable date never expire."""
    if not saved_at:
        return False
    try:
        saved = date.fromisoformat(saved_at[:10])
    except ValueError:
        return False
    return saved < cutoff


class DigestCache(_CacheModel):
    """Snapshot of the two persisted caches.

    Instances are immutable; ``merged`` and ``pruned`` return new snapshots.

    Attributes:
        version: File format version.
        fetched: Fetch cache keyed by link.
        daily: Daily summary cache keyed by run date (YYYY-MM-DD).
    """

    version: int = CACHE_VERSION
    fetched: dict[str, FetchCacheEntry] = Field(default_factory=dict)
    daily: dict[str, DailyCacheEntry] = Field(default_factory=dict)

    def merged(
        self,
        fetched_delta: dict[str, FetchCacheEntry] | None = None,
        daily_delta: dict[str, DailyCacheEntry] | None = None,
    ) -> "DigestCache":
        """Return a snapshot with the deltas applied (delta entries win)."""
        return DigestCache(
            fetched={**self.fetched, **(fetched_delta or {})},
            daily={**self.daily, **(daily_delta or {})},
        )

    def pruned(
        self,
        today: date,
        fetch_retention_days: int,
        daily_retention_days: int,
    ) -> "DigestCache":
        """Return a snapshot without entries older than their retention window.

        A retention of zero or less disables pruning for that cache.
        """
        fetched = self.fetched
        if fetch_retention_days > 0:
            cutoff = today - timedelta(days=fetch_retention_days)
            fetched = {
                link: entry
                for link, entry in fetched.items()
                if not _is_expired(entry.saved_at, cutoff)
            }
        daily = self.daily
        if daily_retention_days > 0:
            cutoff = today - timedelta(days=daily_retention_days)
            daily = {
                run_date: entry
                for run_date, entry in daily.items()
                if not _is_expired(entry.saved_at, cutoff)
            }
        return DigestCache(fetched=fetched, daily=daily)
