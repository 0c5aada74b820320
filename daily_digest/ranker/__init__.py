"""Filtering, scoring and selection of ingested candidates."""

from daily_digest.ranker.filters import filter_candidates
from daily_digest.ranker.scorer import CandidateScorer, select_candidates


__all__ = ["CandidateScorer", "filter_candidates", "select_candidates"]
