"""HTML list page collector."""

import structlog
from bs4 import BeautifulSoup

from daily_digest.collectors.base import BaseCollector, CollectorResult
from daily_digest.collectors.errors import (
    CollectorErrorClass,
    ErrorRecord,
    ParseError,
)
from daily_digest.config.schemas.sources import SourceConfig
from daily_digest.data_model.models import Candidate
from daily_digest.fetch.client import HttpFetcher
from daily_digest.fetch.constants import HTML_ACCEPT


logger = structlog.get_logger()

# Maximum article links taken from one list page
MAX_LIST_LINKS = 40


class HtmlListCollector(BaseCollector):
    """Collector for HTML list pages (blog indexes, news lists).

    Selects elements with the source's CSS selector and emits one
    title-less Candidate per distinct article link. Titles are filled in
    during extraction.
    """

    def __init__(self, run_id: str = "", max_links: int = MAX_LIST_LINKS) -> None:
        """Initialize the HTML list collector.

        Args:
            run_id: Run identifier for logging.
            max_links: Cap on links taken from the page.
        """
        super().__init__(run_id)
        self._max_links = max_links

    def collect(
        self,
        source_config: SourceConfig,
        http_client: HttpFetcher,
    ) -> CollectorResult:
        """Collect candidates from an HTML list page.

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
            method="list",
        )

        result = http_client.fetch(
            source_config.url,
            timeout=http_client.config.page_timeout_seconds,
            extra_headers={"Accept": HTML_ACCEPT},
        )
        if result.error:
            log.warning(
                "fetch_failed",
                error_class=result.error.error_class.value,
                status_code=result.status_code,
            )
            return CollectorResult(
                candidates=[],
                error=ErrorRecord(
                    error_class=CollectorErrorClass.FETCH,
                    message=str(result.error),
                    source_name=source_config.name,
                ),
            )

        try:
            hrefs = self._extract_hrefs(
                result.body_bytes, source_config.link_selector or "", source_config.name
            )
        except ParseError as e:
            log.warning("parse_error", error=e.message)
            return CollectorResult(candidates=[], error=ErrorRecord.from_exception(e))

        candidates: list[Candidate] = []
        for href in hrefs:
            link = self.resolve_url(href, source_config.url)
            if not self.validate_url(link):
                continue
            candidates.append(
                Candidate(
                    source=source_config.name,
                    link=link,
                    weight=source_config.weight,
                )
            )

        log.info(
            "collection_complete",
            links_found=len(hrefs),
            candidates_emitted=len(candidates),
        )
        return CollectorResult(candidates=candidates)

    def _extract_hrefs(
        self, body: bytes, selector: str, source_name: str
    ) -> list[str]:
        """Select href values, deduplicated in page order and capped.

        Raises:
            ParseError: If the selector is invalid or the page cannot be parsed.
        """
        try:
            soup = BeautifulSoup(body, "lxml")
            elements = soup.select(selector)
        except Exception as e:  # noqa: BLE001
            msg = f"Failed to apply selector {selector!r}: {e}"
            raise ParseError(msg, source_name=source_name) from e

        hrefs: list[str] = []
        seen: set[str] = set()
        for element in elements:
            href = element.get("href")
            if not isinstance(href, str) or not href.strip():
                continue
            href = href.strip()
            if href in seen:
                continue
            seen.add(href)
            hrefs.append(href)
            if len(hrefs) >= self._max_links:
                break
        return hrefs
