"""Inline citation markers and bibliography lines."""

import re
from collections.abc import Mapping
from urllib.parse import urlparse

from markupsafe import escape

from daily_digest.data_model.models import Material
from daily_digest.renderer.constants import (
    CITE_PREVIEW_MAX_CHARS,
    UNKNOWN_SOURCE,
    UNTRANSLATED_TITLE,
)


_LINE_BREAK_RE = re.compile(r"[\r\n]+")
_CJK_RE = re.compile("[\u3400-\u9fff]")


def escape_md(value: str | None) -> str:
    """Flatten line breaks so a value cannot break Markdown layout."""
    return _LINE_BREAK_RE.sub(" ", value or "").strip()


def has_cjk(value: str | None) -> bool:
    """Check whether text contains CJK ideographs."""
    return bool(_CJK_RE.search(value or ""))


def safe_http_url(url: str | None) -> str:
    """Return the URL if it is an absolute http(s) URL, else ""."""
    candidate = (url or "").strip()
    try:
        parsed = urlparse(candidate)
    except ValueError:
        return ""
    if parsed.scheme.lower() not in {"http", "https"} or not parsed.netloc:
        return ""
    return candidate


def make_cite_tag(ref_id: int, url: str, title: str) -> str:
    """Render one clickable citation marker with a hover preview."""
    href = safe_http_url(url) or "#"
    preview = f"{ref_id}. {escape_md(title)[:CITE_PREVIEW_MAX_CHARS]}"
    return (
        f'<a class="cite" href="{escape(href)}" target="_blank" '
        f'rel="noopener noreferrer" data-cite="{escape(preview)}">{ref_id}</a>'
    )


def render_refs(refs: list[int], materials_by_id: Mapping[int, Material]) -> str:
    """Render citation markers for ``refs``, skipping unknown ids.

    Returns:
        A leading space plus the markers, or "" when nothing renders.
    """
    tags = [
        make_cite_tag(ref_id, materials_by_id[ref_id].link, materials_by_id[ref_id].title)
        for ref_id in refs
        if ref_id in materials_by_id
    ]
    return " " + "".join(tags) if tags else ""


def build_reference_label(material: Material, translated_title: str | None) -> str:
    """Label of a bibliography entry.

    CJK titles are shown as is; other titles use their translation when one
    exists, otherwise a placeholder.
    """
    title = escape_md(material.title)
    source = escape_md(material.source) or UNKNOWN_SOURCE
    translated = escape_md(translated_title)
    if has_cjk(title):
        return f"{title} · {source}"
    if translated:
        return f"{translated} · {source}"
    return f"{UNTRANSLATED_TITLE} · {source}"


def make_biblio_line(ref_id: int, url: str, label: str) -> str:
    """Render one numbered bibliography line with its anchor."""
    href = safe_http_url(url) or "#"
    return (
        f'- <span id="ref-{ref_id}">{ref_id}.</span> '
        f'<a href="{escape(href)}" target="_blank" rel="noopener noreferrer">'
        f"{escape(escape_md(label))}</a>"
    )
