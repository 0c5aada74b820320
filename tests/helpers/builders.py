"""Builders for records and fakes shared across tests."""

import httpx

from daily_digest.config.schemas.sources import SourceConfig
from daily_digest.data_model.models import Candidate, Material
from daily_digest.fetch.client import HttpFetcher
from daily_digest.fetch.config import FetchConfig


def make_candidate(
    link: str = "https://example.com/a",
    title: str = "Title",
    source: str = "Example",
    publish_date: str | None = None,
    snippet: str = "",
    weight: float = 0.0,
) -> Candidate:
    """Create a test Candidate."""
    return Candidate(
        source=source,
        title=title,
        link=link,
        publish_date=publish_date,
        snippet=snippet,
        weight=weight,
    )


def make_material(
    ref_id: int = 1,
    title: str = "Title",
    link: str | None = None,
    source: str = "Example",
    text: str = "Body text of the article.",
    publish_date: str | None = None,
) -> Material:
    """Create a test Material."""
    return Material(
        ref_id=ref_id,
        source=source,
        title=title,
        link=link or f"https://example.com/{ref_id}",
        publish_date=publish_date,
        text=text,
    )


def make_source(
    name: str = "Example Feed",
    type_: str = "rss",
    url: str = "https://example.com/feed.xml",
    weight: float = 0.0,
    link_selector: str | None = None,
) -> SourceConfig:
    """Create a test SourceConfig from raw values."""
    return SourceConfig.model_validate(
        {
            "name": name,
            "type": type_,
            "url": url,
            "weight": weight,
            "link_selector": link_selector,
        }
    )


def make_fetcher(handler, run_id: str = "test-run") -> HttpFetcher:  # noqa: ANN001
    """Create an HttpFetcher backed by an httpx.MockTransport handler."""
    return HttpFetcher(
        config=FetchConfig(),
        run_id=run_id,
        transport=httpx.MockTransport(handler),
    )


class FakeLlmClient:
    """In-memory LLM client returning queued responses or raising queued errors."""

    def __init__(self, responses: list[str | Exception] | None = None) -> None:
        self.responses = list(responses or [])
        self.calls: list[tuple[str, str | None]] = []

    def generate_content(
        self, prompt: str, system_instruction: str | None = None
    ) -> str:
        self.calls.append((prompt, system_instruction))
        if not self.responses:
            msg = "no queued response"
            raise AssertionError(msg)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response
