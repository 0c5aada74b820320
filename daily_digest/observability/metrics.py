"""Run-level counters for the digest pipeline."""

import threading
from dataclasses import dataclass, field
from typing import ClassVar


@dataclass
class DigestMetrics:
    """Counters recorded while a digest run executes.

    Extraction workers record from several threads, so every mutation
    goes through the instance lock.
    """

    sources_succeeded: int = 0
    sources_failed: int = 0
    candidates_collected: int = 0
    candidates_selected: int = 0
    extraction_cache_hits: int = 0
    extraction_cache_misses: int = 0
    extraction_failures: int = 0
    llm_calls: int = 0
    llm_rate_limit_waits: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    _instance: ClassVar["DigestMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "DigestMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_source(self, succeeded: bool, items: int = 0) -> None:
        """Record the outcome of one source collection."""
        with self._lock:
            if succeeded:
                self.sources_succeeded += 1
            else:
                self.sources_failed += 1
            self.candidates_collected += items

    def record_selected(self, count: int) -> None:
        """Record how many candidates went to extraction."""
        with self._lock:
            self.candidates_selected = count

    def record_extraction(self, cache_hit: bool, failed: bool = False) -> None:
        """Record one extraction task."""
        with self._lock:
            if cache_hit:
                self.extraction_cache_hits += 1
            else:
                self.extraction_cache_misses += 1
            if failed:
                self.extraction_failures += 1

    def record_llm_call(self) -> None:
        """Record one request to the summarization service."""
        with self._lock:
            self.llm_calls += 1

    def record_rate_limit_wait(self) -> None:
        """Record one backoff wait after a rate-limit error."""
        with self._lock:
            self.llm_rate_limit_waits += 1

    def to_dict(self) -> dict[str, int]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        with self._lock:
            return {
                "sources_succeeded": self.sources_succeeded,
                "sources_failed": self.sources_failed,
                "candidates_collected": self.candidates_collected,
                "candidates_selected": self.candidates_selected,
                "extraction_cache_hits": self.extraction_cache_hits,
                "extraction_cache_misses": self.extraction_cache_misses,
                "extraction_failures": self.extraction_failures,
                "llm_calls": self.llm_calls,
                "llm_rate_limit_waits": self.llm_rate_limit_waits,
            }
