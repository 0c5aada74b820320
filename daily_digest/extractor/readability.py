"""Main-content extraction from article pages."""

import re

import structlog
from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict
from readability import Document  # type: ignore[import-untyped]

from daily_digest.fetch.client import HttpFetcher
from daily_digest.fetch.constants import HTML_ACCEPT


logger = structlog.get_logger()

_WHITESPACE_RE = re.compile(r"\s+")

# Placeholder readability returns for pages without a <title>
_NO_TITLE = "[no-title]"


def collapse_whitespace(value: str) -> str:
    """Collapse runs of whitespace into single spaces and trim."""
    return _WHITESPACE_RE.sub(" ", value).strip()


class ArticleExtraction(BaseModel):
    """Outcome of extracting one article page.

    Either ``error`` is None and ``text`` holds the readable body, or
    ``error`` describes why nothing usable was found.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str = ""
    text: str = ""
    error: str | None = None

    @property
    def success(self) -> bool:
        """Whether readable text was extracted."""
        return self.error is None

    @classmethod
    def failure(cls, error: str) -> "ArticleExtraction":
        """Build a failed extraction."""
        return cls(error=error)


def extract_readable_text(html: bytes | str) -> tuple[str, str]:
    """Run the readability algorithm over a page.

    Args:
        html: Raw page markup.

    Returns:
        Tuple of (title, collapsed body text); either may be empty.
    """
    doc = Document(html)
    title = (doc.short_title() or "").strip()
    if title == _NO_TITLE:
        title = ""
    body = BeautifulSoup(doc.summary(html_partial=True), "lxml").get_text(" ")
    return title, collapse_whitespace(body)


def extract_article(
    fetcher: HttpFetcher,
    url: str,
    timeout: float | None = None,
) -> ArticleExtraction:
    """Fetch a page and extract its main text.

    Never raises: network, status and parse failures come back as a failed
    ArticleExtraction.

    Args:
        fetcher: HTTP fetcher.
        url: Article URL.
        timeout: Deadline in seconds (defaults to the fetcher's page timeout).

    Returns:
        ArticleExtraction with title and text, or the failure reason.
    """
    log = logger.bind(component="extractor", url=url)

    result = fetcher.fetch(
        url,
        timeout=timeout or fetcher.config.page_timeout_seconds,
        extra_headers={"Accept": HTML_ACCEPT},
    )
    if result.error:
        log.warning(
            "extraction_failed",
            stage="fetch",
            error_class=result.error.error_class.value,
            error=result.error.message,
        )
        return ArticleExtraction.failure(str(result.error))

    if not result.body_bytes.strip():
        log.warning("extraction_failed", stage="fetch", error="empty body")
        return ArticleExtraction.failure("empty body")

    try:
        title, text = extract_readable_text(result.body_bytes)
    except Exception as e:  # noqa: BLE001
        log.warning("extraction_failed", stage="parse", error=str(e))
        return ArticleExtraction.failure(f"readability failed: {e}")

    if not text:
        log.info("extraction_empty")
        return ArticleExtraction(title=title, error="no readable content")

    return ArticleExtraction(title=title, text=text)
