"""Structured logging configuration."""

import logging
import sys
from typing import TextIO

import structlog


def configure_logging(
    level: int = logging.INFO,
    output: TextIO = sys.stderr,
    json_format: bool = True,
) -> None:
    """Configure structlog for a digest run.

    Args:
        level: Logging level (default: INFO).
        output: Output stream (default: stderr, so stdout stays clean).
        json_format: Render JSON lines instead of the colored console format.
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_format:
        processors.append(
            structlog.processors.JSONRenderer(sort_keys=True, ensure_ascii=False)
        )
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=output.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=False,
    )

    # Third-party libraries (httpx, readability) log through stdlib logging.
    logging.basicConfig(format="%(message)s", stream=output, level=level)
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    logging.getLogger("readability").setLevel(max(level, logging.WARNING))


def bind_run_context(run_id: str, run_date: str | None = None) -> None:
    """Bind run context to all subsequent log messages.

    Args:
        run_id: Unique run identifier.
        run_date: Digest date being generated, if already known.
    """
    structlog.contextvars.bind_contextvars(run_id=run_id)
    if run_date:
        structlog.contextvars.bind_contextvars(run_date=run_date)


def clear_run_context() -> None:
    """Remove run context from log messages."""
    structlog.contextvars.unbind_contextvars("run_id", "run_date")
