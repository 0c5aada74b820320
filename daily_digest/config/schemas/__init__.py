"""Configuration schema definitions."""

from daily_digest.config.schemas.sources import (
    RAW_SOURCE_TYPES,
    SourceConfig,
    SourcesFile,
    SourceType,
)


__all__ = [
    "RAW_SOURCE_TYPES",
    "SourceConfig",
    "SourceType",
    "SourcesFile",
]
