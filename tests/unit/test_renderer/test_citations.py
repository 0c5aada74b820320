"""Tests for citation markers and bibliography lines."""

from daily_digest.renderer.citations import (
    build_reference_label,
    escape_md,
    has_cjk,
    make_biblio_line,
    make_cite_tag,
    render_refs,
    safe_http_url,
)
from daily_digest.renderer.constants import UNKNOWN_SOURCE, UNTRANSLATED_TITLE
from tests.helpers.builders import make_material


class TestHelpers:
    """Tests for small text helpers."""

    def test_escape_md_flattens_newlines(self) -> None:
        """Line breaks become spaces."""
        assert escape_md("a\nb\r\nc") == "a b c"
        assert escape_md(None) == ""

    def test_has_cjk(self) -> None:
        """Chinese characters are detected."""
        assert has_cjk("大模型 news")
        assert not has_cjk("plain English")

    def test_safe_http_url(self) -> None:
        """Only absolute http(s) URLs pass."""
        assert safe_http_url("https://x.com/a") == "https://x.com/a"
        assert safe_http_url("javascript:alert(1)") == ""
        assert safe_http_url("/relative") == ""


class TestCiteTag:
    """Tests for inline citation markers."""

    def test_escapes_attributes(self) -> None:
        """Titles with quotes cannot break out of the attribute."""
        tag = make_cite_tag(3, "https://x.com/a?b=1&c=2", 'Say "hi" <now>')
        assert 'href="https://x.com/a?b=1&amp;c=2"' in tag
        assert "&#34;hi&#34;" in tag
        assert "&lt;now&gt;" in tag
        assert tag.endswith(">3</a>")

    def test_unsafe_url_becomes_hash(self) -> None:
        """Non-http links are replaced by '#'."""
        assert 'href="#"' in make_cite_tag(1, "javascript:x", "t")

    def test_render_refs_skips_unknown(self) -> None:
        """Unknown ids render nothing."""
        materials = {1: make_material(1)}
        rendered = render_refs([1, 9], materials)
        assert rendered.startswith(" ")
        assert rendered.count('class="cite"') == 1
        assert render_refs([9], materials) == ""


class TestReferenceLabel:
    """Tests for bibliography labels."""

    def test_cjk_title_kept(self) -> None:
        """Chinese titles are shown as is."""
        material = make_material(1, title="新模型发布", source="博客")
        assert build_reference_label(material, "ignored") == "新模型发布 · 博客"

    def test_translation_used(self) -> None:
        """Non-CJK titles use the translation."""
        material = make_material(1, title="New model", source="Blog")
        assert build_reference_label(material, "新模型") == "新模型 · Blog"

    def test_placeholder_without_translation(self) -> None:
        """Untranslated non-CJK titles get a placeholder."""
        material = make_material(1, title="New model", source="")
        assert (
            build_reference_label(material, None)
            == f"{UNTRANSLATED_TITLE} · {UNKNOWN_SOURCE}"
        )

    def test_biblio_line_has_anchor(self) -> None:
        """Each line carries a ref anchor and the link."""
        line = make_biblio_line(2, "https://x.com/2", "标签")
        assert line.startswith('- <span id="ref-2">2.</span> ')
        assert 'href="https://x.com/2"' in line
        assert ">标签</a>" in line
