"""Candidate scoring and top-N selection."""

import structlog

from daily_digest.data_model.models import Candidate
from daily_digest.ranker.constants import DATED_BONUS, KEYWORD_BOOST


logger = structlog.get_logger()


class CandidateScorer:
    """Computes a numeric score for a Candidate.

    Scoring formula:
        score = weight + KEYWORD_BOOST * keyword_hits + dated_bonus

    Where:
        - weight: The source's configured weight
        - keyword_hits: Boost keywords found in "title snippet"
          (case-insensitive substring match, each keyword counted once)
        - dated_bonus: DATED_BONUS when a publish date is present
    """

    def __init__(self, boost_keywords: list[str]) -> None:
        """Initialize the scorer.

        Args:
            boost_keywords: Keywords that raise a candidate's score.
        """
        self._keywords = [kw.lower() for kw in boost_keywords if kw]

    def score(self, candidate: Candidate) -> float:
        """Score a single candidate."""
        haystack = f"{candidate.title} {candidate.snippet}".lower()
        keyword_hits = sum(1 for kw in self._keywords if kw in haystack)
        score = candidate.weight + KEYWORD_BOOST * keyword_hits
        if candidate.publish_date:
            score += DATED_BONUS
        return score

    def score_all(self, candidates: list[Candidate]) -> list[Candidate]:
        """Return copies of the candidates with scores assigned."""
        return [
            candidate.model_copy(update={"score": self.score(candidate)})
            for candidate in candidates
        ]


def select_candidates(
    candidates: list[Candidate],
    boost_keywords: list[str],
    prefetch_count: int,
) -> list[Candidate]:
    """Score candidates and keep the best ``prefetch_count``.

    The sort is stable: equal scores keep their input order.

    Args:
        candidates: Filtered candidates in ingestion order.
        boost_keywords: Keywords that raise a candidate's score.
        prefetch_count: Number of candidates to keep.

    Returns:
        Selected candidates, best first.
    """
    scored = CandidateScorer(boost_keywords).score_all(candidates)
    ranked = sorted(scored, key=lambda c: c.score, reverse=True)
    selected = ranked[: max(0, prefetch_count)]

    logger.info(
        "candidates_selected",
        component="ranker",
        input_count=len(candidates),
        selected_count=len(selected),
        prefetch_count=prefetch_count,
    )
    return selected
