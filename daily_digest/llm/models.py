"""Data models for the daily summary and the summarization phase."""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Annotated

from pydantic import BaseModel, ConfigDict, Field


if TYPE_CHECKING:
    from daily_digest.store.models import DailyCacheEntry


class _SummaryModel(BaseModel):
    """Frozen base for summary records.

    Field aliases are the camelCase keys used in the persisted cache file.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class SummaryItem(_SummaryModel):
    """One overview entry; ``refs`` holds Material ref ids."""

    title: Annotated[str, Field(min_length=1)]
    summary: Annotated[str, Field(min_length=1)]
    refs: Annotated[list[int], Field(min_length=1)]


class ImportantItem(SummaryItem):
    """One important entry with the reason it matters."""

    importance_reason: str = Field(default="", alias="importanceReason")


class DailySummary(_SummaryModel):
    """Normalized summary of one day's materials.

    Attributes:
        overview: Key points of the day.
        important: Items worth prioritizing.
        ref_translations: Translated titles keyed by ref id.
        notice: Human-readable notice shown above the sections.
    """

    overview: list[SummaryItem] = Field(default_factory=list)
    important: list[ImportantItem] = Field(default_factory=list)
    ref_translations: dict[int, str] = Field(
        default_factory=dict, alias="refTranslations"
    )
    notice: str | None = None

    @classmethod
    def empty(cls, notice: str) -> "DailySummary":
        """Build an empty summary carrying only a notice."""
        return cls(notice=notice)

    @property
    def is_empty(self) -> bool:
        """Whether the summary has no items."""
        return not self.overview and not self.important


class SummaryStatus(str, Enum):
    """How the daily summary of a run was obtained.

    - CACHED: Reused from the daily cache (fingerprint match)
    - GENERATED: Produced by a summarization call
    - FAILED: Call failed; empty summary with a notice
    - SKIPPED: Call disabled by flags; empty summary with a notice
    - EMPTY: No usable material; empty summary with a notice
    """

    CACHED = "cached"
    GENERATED = "generated"
    FAILED = "failed"
    SKIPPED = "skipped"
    EMPTY = "empty"


@dataclass(frozen=True)
class SummaryOutcome:
    """Result of the summarization phase.

    Attributes:
        daily: Summary to render (never None).
        status: How the summary was obtained.
        fingerprint: Fingerprint of the materials, when computed.
        cache_entry: Daily cache delta for GENERATED outcomes.
        error: Failure description for FAILED outcomes.
    """

    daily: DailySummary
    status: SummaryStatus
    fingerprint: str | None = None
    cache_entry: "DailyCacheEntry | None" = None
    error: str | None = None
