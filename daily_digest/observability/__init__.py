"""Observability module for logging and metrics."""

from daily_digest.observability.logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
)
from daily_digest.observability.metrics import DigestMetrics


__all__ = [
    "DigestMetrics",
    "bind_run_context",
    "clear_run_context",
    "configure_logging",
]
