"""Content extraction phase: selected candidates to numbered materials."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

import structlog

from daily_digest.data_model.models import Candidate, Material
from daily_digest.extractor.pool import run_with_concurrency
from daily_digest.extractor.readability import collapse_whitespace, extract_article
from daily_digest.fetch.client import HttpFetcher
from daily_digest.observability.metrics import DigestMetrics
from daily_digest.store.models import FetchCacheEntry


logger = structlog.get_logger()


@dataclass(frozen=True)
class _ExtractedText:
    """Per-candidate outcome of one extraction task."""

    candidate: Candidate
    title: str
    text: str
    cache_hit: bool
    cache_entry: FetchCacheEntry | None = None


@dataclass
class ExtractionPhaseResult:
    """Result of the extraction phase.

    Attributes:
        materials: Usable materials with dense ref ids, best first.
        fetched_delta: New fetch cache entries, keyed by link.
        cache_hits: Candidates served from the fetch cache.
        cache_misses: Candidates that required a network fetch.
    """

    materials: list[Material] = field(default_factory=list)
    fetched_delta: dict[str, FetchCacheEntry] = field(default_factory=dict)
    cache_hits: int = 0
    cache_misses: int = 0


class ContentExtractor:
    """Extracts readable text for selected candidates.

    Cached links are reused without a network call. Misses are fetched and
    run through readability on a bounded worker pool; the candidate snippet
    stands in when extraction yields nothing. The fetch cache snapshot is
    never modified; new entries are returned as a delta.
    """

    def __init__(  # noqa: PLR0913
        self,
        fetcher: HttpFetcher,
        run_id: str,
        concurrency: int = 4,
        per_article_max_chars: int = 1800,
        min_text_chars: int = 60,
        top_n: int = 15,
    ) -> None:
        """Initialize the extractor.

        Args:
            fetcher: HTTP fetcher for article pages.
            run_id: Run identifier for logging.
            concurrency: Maximum extractions in flight.
            per_article_max_chars: Character budget per article text.
            min_text_chars: Minimum text length for a usable material.
            top_n: Maximum number of materials kept.
        """
        self._fetcher = fetcher
        self._concurrency = concurrency
        self._max_chars = per_article_max_chars
        self._min_chars = min_text_chars
        self._top_n = top_n
        self._metrics = DigestMetrics.get_instance()
        self._log = logger.bind(component="extractor", run_id=run_id)

    def extract(
        self,
        candidates: list[Candidate],
        fetched_cache: Mapping[str, FetchCacheEntry],
        run_date: str,
    ) -> ExtractionPhaseResult:
        """Extract text for candidates and number the usable ones.

        Args:
            candidates: Selected candidates, best first.
            fetched_cache: Fetch cache snapshot keyed by link.
            run_date: Run date stamped on new cache entries.

        Returns:
            ExtractionPhaseResult with materials and the cache delta.
        """
        tasks = [
            self._make_task(candidate, fetched_cache, run_date)
            for candidate in candidates
        ]
        extracted = run_with_concurrency(tasks, self._concurrency)

        phase = ExtractionPhaseResult()
        usable: list[_ExtractedText] = []
        for item in extracted:
            if item.cache_hit:
                phase.cache_hits += 1
            else:
                phase.cache_misses += 1
            if item.cache_entry is not None:
                phase.fetched_delta[item.candidate.link] = item.cache_entry
            if item.text and len(item.text) >= self._min_chars:
                usable.append(item)

        phase.materials = [
            Material.from_candidate(
                item.candidate, ref_id=position + 1, title=item.title, text=item.text
            )
            for position, item in enumerate(usable[: self._top_n])
        ]

        self._log.info(
            "extraction_complete",
            candidates=len(candidates),
            usable=len(usable),
            materials=len(phase.materials),
            cache_hits=phase.cache_hits,
            cache_misses=phase.cache_misses,
        )
        return phase

    def _make_task(
        self,
        candidate: Candidate,
        fetched_cache: Mapping[str, FetchCacheEntry],
        run_date: str,
    ) -> Callable[[], _ExtractedText]:
        """Bind one candidate into a zero-argument extraction task."""
        return lambda: self._extract_one(candidate, fetched_cache, run_date)

    def _extract_one(
        self,
        candidate: Candidate,
        fetched_cache: Mapping[str, FetchCacheEntry],
        run_date: str,
    ) -> _ExtractedText:
        """Extract one candidate, consulting the fetch cache first."""
        cached = fetched_cache.get(candidate.link)
        if cached is not None:
            self._metrics.record_extraction(cache_hit=True)
            self._log.debug("extraction_cache_hit", link=candidate.link)
            return _ExtractedText(
                candidate=candidate,
                title=cached.title or candidate.title or candidate.link,
                text=cached.text,
                cache_hit=True,
            )

        extraction = extract_article(self._fetcher, candidate.link)
        self._metrics.record_extraction(cache_hit=False, failed=not extraction.success)

        title = (candidate.title or extraction.title or candidate.link).strip()
        text = collapse_whitespace(extraction.text or candidate.snippet)[: self._max_chars]

        self._log.debug(
            "extraction_done",
            link=candidate.link,
            success=extraction.success,
            used_snippet=not extraction.text and bool(candidate.snippet),
            text_chars=len(text),
        )
        return _ExtractedText(
            candidate=candidate,
            title=title,
            text=text,
            cache_hit=False,
            cache_entry=FetchCacheEntry(title=title, text=text, saved_at=run_date),
        )
