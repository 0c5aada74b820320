"""Cache file persistence."""

import json
from pathlib import Path
from typing import Any, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from daily_digest.renderer.io import AtomicWriter
from daily_digest.store.models import DailyCacheEntry, DigestCache, FetchCacheEntry


logger = structlog.get_logger()

_EntryT = TypeVar("_EntryT", bound=BaseModel)


def _parse_entries(
    raw: Any, model: type[_EntryT], section: str, log: Any
) -> dict[str, _EntryT]:
    """Validate each entry of one cache section, dropping unreadable ones."""
    if not isinstance(raw, dict):
        return {}
    entries: dict[str, _EntryT] = {}
    dropped = 0
    for key, value in raw.items():
        try:
            entries[str(key)] = model.model_validate(value)
        except ValidationError:
            dropped += 1
    if dropped:
        log.warning("cache_entries_dropped", section=section, dropped=dropped)
    return entries


class CacheStore:
    """Reads and writes the digest cache file.

    The file holds ``{version, fetched, daily}``. A missing file, invalid
    JSON or an unexpected top level yields an empty cache; individual
    unreadable entries are dropped.
    """

    def __init__(self, path: Path, run_id: str = "") -> None:
        """Initialize the cache store.

        Args:
            path: Cache file path.
            run_id: Run identifier for logging.
        """
        self._path = path
        self._writer = AtomicWriter(run_id or None)
        self._log = logger.bind(component="cache", run_id=run_id, path=str(path))

    @property
    def path(self) -> Path:
        """Cache file path."""
        return self._path

    def load(self) -> DigestCache:
        """Load the cache file into an immutable snapshot."""
        if not self._path.is_file():
            self._log.info("cache_missing")
            return DigestCache()

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            self._log.warning("cache_unreadable", error=str(e))
            return DigestCache()

        if not isinstance(raw, dict):
            self._log.warning("cache_unreadable", error="top level is not an object")
            return DigestCache()

        cache = DigestCache(
            fetched=_parse_entries(raw.get("fetched"), FetchCacheEntry, "fetched", self._log),
            daily=_parse_entries(raw.get("daily"), DailyCacheEntry, "daily", self._log),
        )
        self._log.info(
            "cache_loaded",
            fetched_count=len(cache.fetched),
            daily_count=len(cache.daily),
        )
        return cache

    def save(self, cache: DigestCache) -> None:
        """Write the cache file atomically."""
        payload = cache.model_dump(mode="json", by_alias=True)
        self._writer.write(
            self._path, json.dumps(payload, ensure_ascii=False, indent=2) + "\n"
        )
        self._log.info(
            "cache_saved",
            fetched_count=len(cache.fetched),
            daily_count=len(cache.daily),
        )
