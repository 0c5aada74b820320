"""Date helpers shared by the filter, the prompt builder and the CLI."""

import re
import zoneinfo
from datetime import UTC, date, datetime, tzinfo

import structlog
from dateutil import parser as date_parser


logger = structlog.get_logger()

RUN_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class InvalidRunDateError(ValueError):
    """Raised when a run-date override is not a strict YYYY-MM-DD date."""


def parse_publish_date(value: str | None) -> datetime | None:
    """Parse a feed publish date into an aware UTC datetime.

    Naive values are read as UTC. Unparseable values return None.
    """
    if not value or not value.strip():
        return None
    try:
        parsed = date_parser.parse(value)
    except (ValueError, TypeError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def format_publish_date(value: str | None, tz: tzinfo) -> str:
    """Format a raw publish date as an ISO date in the run timezone.

    Unparseable values are returned stripped, missing values as "".
    """
    if not value:
        return ""
    parsed = parse_publish_date(value)
    if parsed is None:
        return value.strip()
    return parsed.astimezone(tz).date().isoformat()


def resolve_timezone(name: str | None) -> tzinfo:
    """Resolve a run timezone, falling back to the system default zone."""
    candidate = (name or "").strip()
    if candidate:
        try:
            return zoneinfo.ZoneInfo(candidate)
        except (ValueError, zoneinfo.ZoneInfoNotFoundError):
            logger.warning("invalid_timezone", timezone=candidate, fallback="system")
    return datetime.now().astimezone().tzinfo or UTC


def resolve_run_date(override: str | None, tz: tzinfo, now: datetime | None = None) -> str:
    """Return the run date as YYYY-MM-DD.

    Args:
        override: Optional explicit date; must match YYYY-MM-DD exactly.
        tz: Timezone used to determine "today".
        now: Current instant (defaults to the system clock).

    Raises:
        InvalidRunDateError: If the override is malformed.
    """
    value = (override or "").strip()
    if not value:
        current = now or datetime.now(UTC)
        return current.astimezone(tz).date().isoformat()
    if not RUN_DATE_PATTERN.match(value):
        msg = f"Run date must be YYYY-MM-DD, got {value!r}"
        raise InvalidRunDateError(msg)
    try:
        date.fromisoformat(value)
    except ValueError as exc:
        msg = f"Run date is not a calendar date: {value!r}"
        raise InvalidRunDateError(msg) from exc
    return value
