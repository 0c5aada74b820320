"""Validation and normalization of the raw summary returned by the model.

Nothing in the raw response is trusted: every field is read through an
explicit list of accepted keys, URL-shaped text is removed, and every
reference id must name an existing material.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Final

import structlog

from daily_digest.data_model.models import Material
from daily_digest.llm.constants import NOTICE_URL_REMOVED
from daily_digest.llm.models import DailySummary, ImportantItem, SummaryItem


logger = structlog.get_logger()

URL_RE: Final[re.Pattern[str]] = re.compile(r"https?://\S+", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")

# Accepted raw keys, in lookup order.
OVERVIEW_KEYS: Final[tuple[str, ...]] = ("overview", "highlights")
IMPORTANT_KEYS: Final[tuple[str, ...]] = ("important",)
TRANSLATIONS_KEYS: Final[tuple[str, ...]] = ("ref_translations", "refTranslations")
SUMMARY_KEYS: Final[tuple[str, ...]] = ("summary", "what_you_get")
REASON_KEYS: Final[tuple[str, ...]] = ("importance_reason", "importanceReason", "reason")
TRANSLATION_ID_KEYS: Final[tuple[str, ...]] = ("id", "ref", "refId")
TRANSLATION_TEXT_KEYS: Final[tuple[str, ...]] = ("zh_title", "translation")


def contains_url(value: str) -> bool:
    """Check whether text contains a URL-shaped substring."""
    return bool(URL_RE.search(value))


def redact_urls(value: str) -> str:
    """Remove URL-shaped substrings and collapse whitespace."""
    return _WHITESPACE_RE.sub(" ", URL_RE.sub("", value)).strip()


def coerce_ref_id(value: object) -> int | None:
    """Coerce one raw ref value to an int.

    Accepts ints, integral floats and ASCII digit strings; booleans and
    anything else (including other Unicode digits) are rejected.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        if text.isascii() and text.isdigit():
            return int(text)
    return None


def normalize_refs(raw_refs: object, allowed: set[int]) -> list[int]:
    """Coerce, filter to allowed ids and dedupe refs, preserving order."""
    if not isinstance(raw_refs, list):
        return []
    refs: list[int] = []
    for value in raw_refs:
        ref_id = coerce_ref_id(value)
        if ref_id is None or ref_id not in allowed or ref_id in refs:
            continue
        refs.append(ref_id)
    return refs


def _first_text(entry: Mapping[str, object], keys: Iterable[str]) -> str:
    """Return the first non-empty string value among ``keys``."""
    for key in keys:
        value = entry.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return ""


def _first_list(raw: Mapping[str, object], keys: Iterable[str]) -> list[object]:
    """Return the first list value among ``keys``."""
    for key in keys:
        value = raw.get(key)
        if isinstance(value, list):
            return value
    return []


def _mappings(entries: list[object]) -> list[Mapping[str, object]]:
    return [entry for entry in entries if isinstance(entry, Mapping)]


class _UrlTracker:
    """Records whether any raw text field contained a URL."""

    def __init__(self) -> None:
        self.found = False

    def clean(self, value: str) -> str:
        if contains_url(value):
            self.found = True
        return redact_urls(value)


def normalize_daily_summary(
    raw: Mapping[str, object],
    materials: list[Material],
) -> DailySummary:
    """Turn a parsed model response into a validated DailySummary.

    Args:
        raw: Parsed JSON object from the model.
        materials: Materials the summary may cite.

    Returns:
        DailySummary whose refs all name existing materials. It carries the
        manual-review notice when any raw text field contained a URL.
    """
    allowed = {material.ref_id for material in materials}
    urls = _UrlTracker()

    overview: list[SummaryItem] = []
    raw_overview = _mappings(_first_list(raw, OVERVIEW_KEYS))
    for entry in raw_overview:
        title = urls.clean(_first_text(entry, ("title",)))
        summary = urls.clean(_first_text(entry, SUMMARY_KEYS))
        refs = normalize_refs(entry.get("refs"), allowed)
        if title and summary and refs:
            overview.append(SummaryItem(title=title, summary=summary, refs=refs))

    important: list[ImportantItem] = []
    raw_important = _mappings(_first_list(raw, IMPORTANT_KEYS))
    for entry in raw_important:
        title = urls.clean(_first_text(entry, ("title",)))
        summary = urls.clean(_first_text(entry, SUMMARY_KEYS))
        reason = urls.clean(_first_text(entry, REASON_KEYS))
        refs = normalize_refs(entry.get("refs"), allowed)
        if title and summary and refs:
            important.append(
                ImportantItem(
                    title=title,
                    summary=summary,
                    importance_reason=reason,
                    refs=refs,
                )
            )

    translations: dict[int, str] = {}
    raw_translations = _mappings(_first_list(raw, TRANSLATIONS_KEYS))
    for entry in raw_translations:
        ref_id = None
        for key in TRANSLATION_ID_KEYS:
            if key in entry:
                ref_id = coerce_ref_id(entry[key])
                break
        text = urls.clean(_first_text(entry, TRANSLATION_TEXT_KEYS))
        if ref_id is None or ref_id not in allowed or not text:
            continue
        translations[ref_id] = text

    dropped = (
        len(raw_overview) - len(overview) + len(raw_important) - len(important)
    )
    logger.info(
        "summary_normalized",
        component="llm",
        overview=len(overview),
        important=len(important),
        translations=len(translations),
        dropped_items=dropped,
        urls_removed=urls.found,
    )

    return DailySummary(
        overview=overview,
        important=important,
        ref_translations=translations,
        notice=NOTICE_URL_REMOVED if urls.found else None,
    )
