"""Dedup and recency filter over ingested candidates."""

from datetime import datetime, timedelta

import structlog

from daily_digest.data_model.dates import parse_publish_date
from daily_digest.data_model.models import Candidate


logger = structlog.get_logger()


def filter_candidates(
    candidates: list[Candidate],
    now: datetime,
    lookback_days: int,
) -> list[Candidate]:
    """Drop stale, link-less and duplicate candidates, keeping input order.

    Candidates whose publish date cannot be parsed (or is missing) are
    treated as recent and kept. Duplicates are detected by exact link
    string; the first occurrence wins.

    Args:
        candidates: Concatenated candidates in source order.
        now: Reference instant for the recency window (timezone-aware).
        lookback_days: Window size in days.

    Returns:
        Filtered candidates.
    """
    cutoff = now - timedelta(days=lookback_days)
    seen_links: set[str] = set()
    kept: list[Candidate] = []
    stale = 0
    duplicates = 0

    for candidate in candidates:
        published_at = parse_publish_date(candidate.publish_date)
        if published_at is not None and published_at < cutoff:
            stale += 1
            continue
        if not candidate.link:
            continue
        if candidate.link in seen_links:
            duplicates += 1
            continue
        seen_links.add(candidate.link)
        kept.append(candidate)

    logger.info(
        "candidates_filtered",
        component="ranker",
        input_count=len(candidates),
        kept_count=len(kept),
        stale_count=stale,
        duplicate_count=duplicates,
        cutoff=cutoff.isoformat(),
    )
    return kept
