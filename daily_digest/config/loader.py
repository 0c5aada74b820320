"""Sources file loader with per-entry validation."""

from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from daily_digest.config.errors import ConfigFileNotFoundError, ConfigValidationError
from daily_digest.config.schemas.sources import SourceConfig, SourcesFile


logger = structlog.get_logger()


def _format_validation_errors(error: ValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors into loggable dictionaries."""
    return [
        {
            "loc": ".".join(str(part) for part in err["loc"]) or "<root>",
            "msg": err["msg"],
            "type": err["type"],
        }
        for err in error.errors()
    ]


def _parse_sources(raw_sources: Any, file_path: str) -> list[SourceConfig]:
    """Validate each source entry, skipping invalid ones with a warning."""
    log = logger.bind(component="config", file_path=file_path)

    if raw_sources is None:
        return []
    if not isinstance(raw_sources, list):
        log.warning("sources_not_a_list", actual_type=type(raw_sources).__name__)
        return []

    sources: list[SourceConfig] = []
    for index, entry in enumerate(raw_sources):
        if not isinstance(entry, dict):
            log.warning(
                "source_skipped",
                index=index,
                reason="entry is not a mapping",
            )
            continue
        try:
            sources.append(SourceConfig.model_validate(entry))
        except ValidationError as e:
            log.warning(
                "source_skipped",
                index=index,
                name=str(entry.get("name") or ""),
                errors=_format_validation_errors(e),
            )
    return sources


def load_sources_file(path: Path) -> SourcesFile:
    """Load and validate a sources file.

    Invalid source entries are skipped; only a missing file, broken YAML or
    an invalid top level are fatal.

    Args:
        path: Path to sources.yml.

    Returns:
        Validated SourcesFile.

    Raises:
        ConfigFileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML or its top-level fields are invalid.
    """
    file_path = str(path)
    log = logger.bind(component="config", file_path=file_path)

    if not path.is_file():
        raise ConfigFileNotFoundError(file_path)

    try:
        parsed = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigValidationError(
            [{"loc": "<root>", "msg": str(e), "type": "yaml_parse_error"}],
            file_path,
        ) from e

    if not isinstance(parsed, dict):
        raise ConfigValidationError(
            [
                {
                    "loc": "<root>",
                    "msg": "Top level must be a mapping",
                    "type": "dict_type",
                }
            ],
            file_path,
        )

    sources = _parse_sources(parsed.get("sources"), file_path)
    try:
        config = SourcesFile.model_validate(
            {
                "lookback_days": parsed.get("lookback_days"),
                "boost_keywords": parsed.get("boost_keywords"),
                "sources": sources,
            }
        )
    except ValidationError as e:
        raise ConfigValidationError(_format_validation_errors(e), file_path) from e

    log.info(
        "sources_loaded",
        sources_count=len(config.sources),
        skipped_count=(
            len(parsed["sources"]) - len(config.sources)
            if isinstance(parsed.get("sources"), list)
            else 0
        ),
        lookback_days=config.lookback_days,
        boost_keywords_count=len(config.boost_keywords),
    )
    return config
