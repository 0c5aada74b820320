"""Application settings powered by Pydantic BaseSettings."""

from typing import Annotated

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Centralized environment configuration for a digest run.

    Every field maps to one environment variable (or ``.env`` entry).
    CLI flags may override a subset of them.
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )

    # Summarization service
    zhipu_api_key: str | None = Field(default=None, validation_alias="ZHIPU_API_KEY")
    zhipu_model: str = Field(default="glm-4.7-flash", validation_alias="ZHIPU_MODEL")

    # Selection
    lookback_days: Annotated[int, Field(ge=0)] | None = Field(
        default=None, validation_alias="DIGEST_LOOKBACK_DAYS"
    )
    top_n: Annotated[int, Field(ge=1, le=100)] = Field(
        default=15, validation_alias="DIGEST_TOP_N"
    )
    extra_candidates: int = Field(default=0, validation_alias="DIGEST_EXTRA_CANDIDATES")

    # Extraction
    fetch_concurrency: Annotated[int, Field(ge=1, le=32)] = Field(
        default=4, validation_alias="DIGEST_FETCH_CONCURRENCY"
    )
    per_article_max_chars: Annotated[int, Field(ge=100)] = Field(
        default=1800, validation_alias="DIGEST_PER_ARTICLE_MAX_CHARS"
    )
    min_text_chars: Annotated[int, Field(ge=0)] = Field(
        default=60, validation_alias="DIGEST_MIN_TEXT_CHARS"
    )

    # Timeouts (seconds)
    feed_timeout_seconds: Annotated[float, Field(gt=0)] = Field(
        default=120.0, validation_alias="DIGEST_FEED_TIMEOUT_SECONDS"
    )
    page_timeout_seconds: Annotated[float, Field(gt=0)] = Field(
        default=25.0, validation_alias="DIGEST_PAGE_TIMEOUT_SECONDS"
    )
    llm_timeout_seconds: Annotated[float, Field(gt=0)] = Field(
        default=40.0, validation_alias="DIGEST_LLM_TIMEOUT_SECONDS"
    )

    # Rate-limit handling (milliseconds)
    llm_max_retries: Annotated[int, Field(ge=0, le=20)] = Field(
        default=6, validation_alias="DIGEST_LLM_MAX_RETRIES"
    )
    llm_backoff_base_ms: Annotated[int, Field(ge=0)] = Field(
        default=1500, validation_alias="DIGEST_LLM_BACKOFF_BASE_MS"
    )
    llm_backoff_cap_ms: Annotated[int, Field(ge=0)] = Field(
        default=20000, validation_alias="DIGEST_LLM_BACKOFF_CAP_MS"
    )
    llm_backoff_jitter_ms: Annotated[int, Field(ge=0)] = Field(
        default=600, validation_alias="DIGEST_LLM_BACKOFF_JITTER_MS"
    )
    llm_min_interval_ms: Annotated[int, Field(ge=0)] = Field(
        default=3000, validation_alias="DIGEST_LLM_MIN_INTERVAL_MS"
    )

    # Cache retention (days)
    cache_retention_days: int = Field(
        default=14, validation_alias="DIGEST_CACHE_RETENTION_DAYS"
    )
    daily_retention_days: int = Field(
        default=120, validation_alias="DIGEST_DAILY_RETENTION_DAYS"
    )

    # Run identity
    digest_tz: str | None = Field(
        default=None, validation_alias=AliasChoices("DIGEST_TZ", "TZ")
    )
    digest_post_time: str = Field(
        default="08:00:00", validation_alias="DIGEST_POST_TIME"
    )
    digest_date: str | None = Field(default=None, validation_alias="DIGEST_DATE")

    # Flags
    dry_run: bool = Field(default=False, validation_alias="DIGEST_DRY_RUN")
    dry_run_llm: bool = Field(default=False, validation_alias="DIGEST_DRY_RUN_LLM")
    skip_llm: bool = Field(default=False, validation_alias="DIGEST_SKIP_LLM")
    force_llm: bool = Field(default=False, validation_alias="DIGEST_FORCE_LLM")

    @field_validator("extra_candidates")
    @classmethod
    def clamp_extra_candidates(cls, v: int) -> int:
        """Negative backfill counts mean no backfill."""
        return max(0, v)

    @field_validator("digest_post_time")
    @classmethod
    def default_blank_post_time(cls, v: str) -> str:
        """Blank post time falls back to the default publish time."""
        return v.strip() or "08:00:00"

    @property
    def prefetch_count(self) -> int:
        """Number of candidates sent to extraction."""
        return self.top_n + self.extra_candidates

    @property
    def summarization_enabled(self) -> bool:
        """Whether this run may call the summarization service."""
        if self.skip_llm:
            return False
        return not self.dry_run or self.dry_run_llm


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
