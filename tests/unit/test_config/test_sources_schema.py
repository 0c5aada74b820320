"""Unit tests for the sources file schema."""

import pytest
from pydantic import ValidationError

from daily_digest.config.schemas.sources import (
    DEFAULT_LOOKBACK_DAYS,
    SourceConfig,
    SourcesFile,
    SourceType,
)


class TestSourceConfig:
    """Tests for SourceConfig validation."""

    @pytest.mark.parametrize(
        ("raw_type", "expected"),
        [
            ("rss", SourceType.FEED),
            ("atom", SourceType.FEED),
            ("youtube_rss", SourceType.FEED),
            ("RSS", SourceType.FEED),
            ("html_list", SourceType.LIST),
        ],
    )
    def test_maps_raw_types(self, raw_type: str, expected: SourceType) -> None:
        """Raw type names map onto canonical types."""
        config = SourceConfig.model_validate(
            {
                "name": "S",
                "type": raw_type,
                "url": "https://example.com",
                "link_selector": "a",
            }
        )
        assert config.type == expected

    def test_unknown_type_rejected(self) -> None:
        """Unknown types are a validation error."""
        with pytest.raises(ValidationError):
            SourceConfig.model_validate(
                {"name": "S", "type": "podcast", "url": "https://example.com"}
            )

    def test_missing_weight_is_zero(self) -> None:
        """A missing or null weight defaults to zero."""
        config = SourceConfig.model_validate(
            {"name": "S", "type": "rss", "url": "https://example.com", "weight": None}
        )
        assert config.weight == 0.0

    def test_bool_weight_rejected(self) -> None:
        """Booleans are not accepted as weights."""
        with pytest.raises(ValidationError):
            SourceConfig.model_validate(
                {"name": "S", "type": "rss", "url": "https://example.com", "weight": True}
            )

    def test_non_http_url_rejected(self) -> None:
        """URLs must use http or https."""
        with pytest.raises(ValidationError):
            SourceConfig.model_validate(
                {"name": "S", "type": "rss", "url": "ftp://example.com/feed"}
            )

    def test_list_source_requires_selector(self) -> None:
        """List sources without a selector are invalid."""
        with pytest.raises(ValidationError):
            SourceConfig.model_validate(
                {
                    "name": "S",
                    "type": "html_list",
                    "url": "https://example.com",
                    "link_selector": "   ",
                }
            )

    def test_strips_text_fields(self) -> None:
        """Name and URL are trimmed."""
        config = SourceConfig.model_validate(
            {"name": "  Blog  ", "type": "rss", "url": " https://example.com/rss "}
        )
        assert config.name == "Blog"
        assert config.url == "https://example.com/rss"


class TestSourcesFile:
    """Tests for the sources file root model."""

    @pytest.mark.parametrize("value", [None, 0, ""])
    def test_falsy_lookback_uses_default(self, value: object) -> None:
        """Unset or zero lookback falls back to the default."""
        config = SourcesFile.model_validate({"lookback_days": value})
        assert config.lookback_days == DEFAULT_LOOKBACK_DAYS

    def test_keywords_normalized(self) -> None:
        """Blank keywords are dropped and the rest trimmed."""
        config = SourcesFile.model_validate(
            {"boost_keywords": [" LLM ", "", None, "agent"]}
        )
        assert config.boost_keywords == ["LLM", "agent"]

    def test_non_list_keywords_ignored(self) -> None:
        """A scalar keyword value means no keywords."""
        config = SourcesFile.model_validate({"boost_keywords": "LLM"})
        assert config.boost_keywords == []
