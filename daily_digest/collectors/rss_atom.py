"""RSS/Atom feed collector."""

import feedparser  # type: ignore[import-untyped]
import structlog

from daily_digest.collectors.base import BaseCollector, CollectorResult
from daily_digest.collectors.errors import (
    CollectorError,
    CollectorErrorClass,
    ErrorRecord,
    ParseError,
)
from daily_digest.config.schemas.sources import SourceConfig
from daily_digest.data_model.models import Candidate
from daily_digest.fetch.client import HttpFetcher
from daily_digest.fetch.constants import FEED_ACCEPT


logger = structlog.get_logger()

# Total attempts per feed, including the first one.
MAX_FEED_ATTEMPTS = 2


class RssAtomCollector(BaseCollector):
    """Collector for RSS and Atom feeds.

    Parses feeds with feedparser. A failed attempt (fetch error, or a
    malformed feed that yields no entries) is retried once; the last error
    is surfaced in the result.
    """

    def __init__(
        self,
        run_id: str = "",
        max_attempts: int = MAX_FEED_ATTEMPTS,
    ) -> None:
        """Initialize the RSS/Atom collector.

        Args:
            run_id: Run identifier for logging.
            max_attempts: Total attempts per feed.
        """
        super().__init__(run_id)
        self._max_attempts = max(1, max_attempts)

    def collect(
        self,
        source_config: SourceConfig,
        http_client: HttpFetcher,
    ) -> CollectorResult:
        """Collect candidates from an RSS/Atom feed.

        Args:
            source_config: Configuration for the source.
            http_client: HTTP client for fetching.

        Returns:
            CollectorResult with candidates and status.
        """
        log = logger.bind(
            component="collector",
            run_id=self._run_id,
            source=source_config.name,
            method="feed",
        )

        failures: list[CollectorError] = []
        for attempt in range(1, self._max_attempts + 1):
            parse_warnings: list[str] = []
            try:
                candidates = self._collect_once(
                    source_config, http_client, parse_warnings
                )
            except CollectorError as e:
                failures.append(e)
                log.warning(
                    "feed_attempt_failed",
                    attempt=attempt,
                    max_attempts=self._max_attempts,
                    error_class=e.error_class.value,
                    error=e.message,
                )
                continue

            log.info(
                "collection_complete",
                attempt=attempt,
                candidates_emitted=len(candidates),
                parse_warnings_count=len(parse_warnings),
            )
            return CollectorResult(candidates=candidates, parse_warnings=parse_warnings)

        return CollectorResult(
            candidates=[],
            error=ErrorRecord.from_exception(failures[-1], attempts=len(failures)),
        )

    def _collect_once(
        self,
        source_config: SourceConfig,
        http_client: HttpFetcher,
        parse_warnings: list[str],
    ) -> list[Candidate]:
        """Fetch and parse the feed once.

        Raises:
            CollectorError: If the fetch fails.
            ParseError: If the feed is malformed and has no entries.
        """
        result = http_client.fetch(
            source_config.url,
            timeout=http_client.config.feed_timeout_seconds,
            extra_headers={"Accept": FEED_ACCEPT},
        )
        if result.error:
            raise CollectorError(
                error_class=CollectorErrorClass.FETCH,
                message=str(result.error),
                source_name=source_config.name,
            )

        try:
            feed = feedparser.parse(result.body_bytes)
        except Exception as e:  # noqa: BLE001
            msg = f"Feed could not be parsed: {e}"
            raise ParseError(msg, source_name=source_config.name) from e

        if feed.bozo and not feed.entries:
            msg = f"Malformed feed: {feed.get('bozo_exception')}"
            raise ParseError(msg, source_name=source_config.name)
        if feed.bozo:
            # Feed had parsing issues but is still usable
            parse_warnings.append(f"Feed parsing warning: {feed.get('bozo_exception')}")

        candidates: list[Candidate] = []
        for entry in feed.entries:
            candidate = self._parse_entry(entry, source_config)
            if candidate is None:
                parse_warnings.append("Entry without a usable link skipped")
                continue
            candidates.append(candidate)
        return candidates

    def _parse_entry(
        self,
        entry: feedparser.FeedParserDict,
        source_config: SourceConfig,
    ) -> Candidate | None:
        """Parse a single feed entry; entries without a link are dropped.

        Args:
            entry: Feedparser entry dict.
            source_config: Source configuration.

        Returns:
            Candidate, or None when the entry has no http(s) link.
        """
        link = entry.get("link", "") or ""
        if not link:
            for link_entry in entry.get("links", []):
                if link_entry.get("rel") == "alternate" and link_entry.get("href"):
                    link = link_entry["href"]
                    break
        if not link:
            return None

        link = self.resolve_url(link, source_config.url)
        if not self.validate_url(link):
            return None

        publish_date = entry.get("published") or entry.get("updated") or None
        snippet = entry.get("summary", "") or entry.get("description", "") or ""

        return Candidate(
            source=source_config.name,
            title=(entry.get("title", "") or "").strip(),
            link=link,
            publish_date=publish_date.strip() if publish_date else None,
            snippet=self.html_to_text(snippet),
            weight=source_config.weight,
        )
