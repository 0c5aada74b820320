"""Configuration loading and validation module."""

from daily_digest.config.errors import (
    ConfigFileNotFoundError,
    ConfigValidationError,
    MissingApiKeyError,
    SetupError,
)
from daily_digest.config.loader import load_sources_file
from daily_digest.config.schemas import SourceConfig, SourcesFile, SourceType


__all__ = [
    "ConfigFileNotFoundError",
    "ConfigValidationError",
    "MissingApiKeyError",
    "SetupError",
    "SourceConfig",
    "SourceType",
    "SourcesFile",
    "load_sources_file",
]
