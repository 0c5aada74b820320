"""Shared data model for the digest pipeline."""

from daily_digest.data_model.dates import (
    InvalidRunDateError,
    format_publish_date,
    parse_publish_date,
    resolve_run_date,
    resolve_timezone,
)
from daily_digest.data_model.models import Candidate, Material, StrictBaseModel


__all__ = [
    "Candidate",
    "InvalidRunDateError",
    "Material",
    "StrictBaseModel",
    "format_publish_date",
    "parse_publish_date",
    "resolve_run_date",
    "resolve_timezone",
]
