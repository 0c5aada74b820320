"""Base collector interface and utilities."""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from daily_digest.collectors.errors import ErrorRecord
from daily_digest.config.schemas.sources import SourceConfig
from daily_digest.data_model.models import Candidate
from daily_digest.fetch.client import HttpFetcher


_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class CollectorResult:
    """Result of a collector execution.

    A failed source has ``error`` set and no candidates.
    """

    candidates: list[Candidate]
    parse_warnings: list[str] = field(default_factory=list)
    error: ErrorRecord | None = None

    @property
    def success(self) -> bool:
        """Check if collection succeeded."""
        return self.error is None

    @property
    def candidates_count(self) -> int:
        """Get number of candidates collected."""
        return len(self.candidates)


class BaseCollector(ABC):
    """Abstract base class for collectors."""

    def __init__(self, run_id: str = "") -> None:
        """Initialize the base collector.

        Args:
            run_id: Run identifier for logging.
        """
        self._run_id = run_id

    @abstractmethod
    def collect(
        self,
        source_config: SourceConfig,
        http_client: HttpFetcher,
    ) -> CollectorResult:
        """Collect candidates from a source.

        Args:
            source_config: Configuration for the source.
            http_client: HTTP client for fetching.

        Returns:
            CollectorResult with candidates and status.
        """

    def resolve_url(self, url: str, base_url: str) -> str:
        """Resolve a possibly relative URL against the source URL."""
        url = url.strip()
        if url.startswith(("http://", "https://")):
            return url
        return urljoin(base_url, url)

    def validate_url(self, url: str) -> bool:
        """Validate that a URL has http(s) scheme.

        Args:
            url: The URL to validate.

        Returns:
            True if URL is valid.
        """
        return url.startswith(("http://", "https://"))

    def html_to_text(self, value: str) -> str:
        """Strip markup and collapse whitespace."""
        if not value:
            return ""
        if "<" in value:
            value = BeautifulSoup(value, "lxml").get_text(" ")
        return _WHITESPACE_RE.sub(" ", value).strip()
