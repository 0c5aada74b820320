"""Source configuration schema."""

from enum import Enum
from typing import Annotated, Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


DEFAULT_LOOKBACK_DAYS: Final[int] = 2


class SourceType(str, Enum):
    """Canonical ingestion method for a source.

    - FEED: RSS/Atom syndication feed
    - LIST: HTML listing page scraped with a CSS selector
    """

    FEED = "feed"
    LIST = "list"


# Raw type names accepted in sources.yml and the canonical type they map to.
RAW_SOURCE_TYPES: Final[dict[str, SourceType]] = {
    "rss": SourceType.FEED,
    "atom": SourceType.FEED,
    "feed": SourceType.FEED,
    "youtube_rss": SourceType.FEED,
    "html_list": SourceType.LIST,
    "list": SourceType.LIST,
}


class SourceConfig(BaseModel):
    """Configuration for a single source.

    Attributes:
        name: Human-readable name, shown in the reference list.
        type: Canonical ingestion method.
        url: Feed or listing page URL.
        weight: Score bonus applied to every candidate from this source.
        link_selector: CSS selector for article links (list sources only).
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: Annotated[str, Field(min_length=1, max_length=200)]
    type: SourceType
    url: Annotated[str, Field(min_length=1)]
    weight: float = 0.0
    link_selector: str | None = None

    @field_validator("name", "url", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        """Trim surrounding whitespace from text fields."""
        return v.strip() if isinstance(v, str) else v

    @field_validator("type", mode="before")
    @classmethod
    def map_raw_type(cls, v: Any) -> SourceType:
        """Map a raw type name onto its canonical SourceType."""
        key = str(v or "").strip().lower()
        if key not in RAW_SOURCE_TYPES:
            msg = f"Unknown source type {v!r}; expected one of {sorted(RAW_SOURCE_TYPES)}"
            raise ValueError(msg)
        return RAW_SOURCE_TYPES[key]

    @field_validator("weight", mode="before")
    @classmethod
    def default_missing_weight(cls, v: Any) -> Any:
        """Treat a missing weight as zero."""
        if v is None or v == "":
            return 0.0
        if isinstance(v, bool):
            msg = "weight must be a number"
            raise ValueError(msg)
        return v

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL starts with http:// or https://."""
        if not v.startswith(("http://", "https://")):
            msg = "URL must start with http:// or https://"
            raise ValueError(msg)
        return v

    @field_validator("link_selector", mode="before")
    @classmethod
    def blank_selector_is_none(cls, v: Any) -> Any:
        """Normalize a blank selector to None."""
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="after")
    def validate_list_selector(self) -> "SourceConfig":
        """Ensure list sources carry a link selector."""
        if self.type == SourceType.LIST and not self.link_selector:
            msg = "list sources require link_selector"
            raise ValueError(msg)
        return self


class SourcesFile(BaseModel):
    """Root configuration for sources.yml.

    Attributes:
        lookback_days: Recency window for the filter, in days.
        boost_keywords: Keywords that add to a candidate's score.
        sources: Valid sources in configuration order.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    lookback_days: Annotated[int, Field(ge=1)] = DEFAULT_LOOKBACK_DAYS
    boost_keywords: list[str] = Field(default_factory=list)
    sources: list[SourceConfig] = Field(default_factory=list)

    @field_validator("lookback_days", mode="before")
    @classmethod
    def default_lookback(cls, v: Any) -> Any:
        """Fall back to the default window when unset or zero."""
        if v is None or v == "" or v == 0:
            return DEFAULT_LOOKBACK_DAYS
        return v

    @field_validator("boost_keywords", mode="before")
    @classmethod
    def normalize_keywords(cls, v: Any) -> list[str]:
        """Keep non-empty keywords; a non-list value means no keywords."""
        if not isinstance(v, list):
            return []
        return [str(kw).strip() for kw in v if kw is not None and str(kw).strip()]
