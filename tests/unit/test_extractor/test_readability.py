"""Tests for readable-text extraction."""

import httpx

from daily_digest.extractor.readability import (
    collapse_whitespace,
    extract_article,
    extract_readable_text,
)
from tests.helpers.builders import make_fetcher


ARTICLE_HTML = """<html>
<head><title>Model release notes</title></head>
<body>
  <nav><a href="/">Home</a> <a href="/blog">Blog</a></nav>
  <article>
    <h1>Model release notes</h1>
    <p>The team released a new model today with improved reasoning, longer
    context windows, and a lower price for developers building agents.</p>
    <p>Benchmarks show consistent gains across coding, mathematics, and
    multilingual tasks, with particular improvements on long documents.</p>
    <p>The model is available through the API starting this week, and the
    documentation has been updated with migration guidance for users.</p>
  </article>
  <footer>Copyright</footer>
</body>
</html>
"""


class TestCollapseWhitespace:
    """Tests for whitespace normalization."""

    def test_collapses_runs(self) -> None:
        """Newlines, tabs and repeated spaces become single spaces."""
        assert collapse_whitespace("  a\n\n b\t\tc  ") == "a b c"


class TestExtractReadableText:
    """Tests for the readability wrapper."""

    def test_extracts_title_and_body(self) -> None:
        """Main paragraphs are returned as collapsed text."""
        title, text = extract_readable_text(ARTICLE_HTML)

        assert title == "Model release notes"
        assert "improved reasoning" in text
        assert "available through the API" in text
        assert "\n" not in text


class TestExtractArticle:
    """Tests for fetch plus extraction."""

    def test_success(self) -> None:
        """A readable page yields text and no error."""
        fetcher = make_fetcher(
            lambda request: httpx.Response(200, content=ARTICLE_HTML.encode())
        )

        extraction = extract_article(fetcher, "https://example.com/post")

        assert extraction.success
        assert "Benchmarks show consistent gains" in extraction.text

    def test_fetch_failure_is_reported(self) -> None:
        """HTTP errors become a failed extraction, not an exception."""
        fetcher = make_fetcher(lambda request: httpx.Response(404))

        extraction = extract_article(fetcher, "https://example.com/missing")

        assert not extraction.success
        assert extraction.text == ""
        assert "HTTP_4XX" in (extraction.error or "")

    def test_empty_body_is_failure(self) -> None:
        """An empty body has nothing to extract."""
        fetcher = make_fetcher(lambda request: httpx.Response(200, content=b"   "))

        extraction = extract_article(fetcher, "https://example.com/blank")

        assert not extraction.success
