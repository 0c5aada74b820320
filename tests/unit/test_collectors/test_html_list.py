"""Tests for HtmlListCollector."""

import httpx

from daily_digest.collectors.errors import CollectorErrorClass
from daily_digest.collectors.html_list import HtmlListCollector
from tests.helpers.builders import make_fetcher, make_source


LIST_PAGE = b"""<html><body>
<a class="post" href="/news/one">One</a>
<a class="post" href="/news/one">One again</a>
<a class="post" href="https://other.example.com/two">Two</a>
<a class="post" href="mailto:someone@example.com">Mail</a>
<a class="post">No href</a>
<a class="nav" href="/about">About</a>
</body></html>
"""


def list_source(selector: str = "a.post"):  # noqa: ANN201
    """Create a list source."""
    return make_source(
        name="News",
        type_="html_list",
        url="https://example.com/news/",
        weight=1.5,
        link_selector=selector,
    )


class TestHtmlListCollector:
    """Tests for list page collection."""

    def test_selects_resolves_and_dedupes(self) -> None:
        """Selected links are resolved, deduplicated and filtered to http(s)."""
        fetcher = make_fetcher(lambda request: httpx.Response(200, content=LIST_PAGE))

        result = HtmlListCollector().collect(list_source(), fetcher)

        assert result.success
        assert [c.link for c in result.candidates] == [
            "https://example.com/news/one",
            "https://other.example.com/two",
        ]
        assert all(c.title == "" for c in result.candidates)
        assert all(c.weight == 1.5 for c in result.candidates)
        assert all(c.publish_date is None for c in result.candidates)

    def test_caps_links(self) -> None:
        """At most max_links links are taken."""
        body = "".join(f'<a class="post" href="/p/{i}">p</a>' for i in range(60))
        fetcher = make_fetcher(
            lambda request: httpx.Response(200, content=body.encode())
        )

        result = HtmlListCollector(max_links=40).collect(list_source(), fetcher)

        assert len(result.candidates) == 40
        assert result.candidates[0].link == "https://example.com/p/0"

    def test_fetch_failure_is_reported(self) -> None:
        """HTTP errors fail the source without raising."""
        fetcher = make_fetcher(lambda request: httpx.Response(404))

        result = HtmlListCollector().collect(list_source(), fetcher)

        assert not result.success
        assert result.error is not None
        assert result.error.error_class == CollectorErrorClass.FETCH

    def test_invalid_selector_is_parse_error(self) -> None:
        """A selector that cannot be compiled is a parse failure."""
        fetcher = make_fetcher(lambda request: httpx.Response(200, content=LIST_PAGE))

        result = HtmlListCollector().collect(list_source("a[[["), fetcher)

        assert not result.success
        assert result.error is not None
        assert result.error.error_class == CollectorErrorClass.PARSE
