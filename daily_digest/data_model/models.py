"""Core records passed between pipeline phases."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class StrictBaseModel(BaseModel):
    """Base model with strict, immutable defaults."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class Candidate(StrictBaseModel):
    """A raw ingested item before ranking or extraction.

    Attributes:
        source: Name of the source that produced the candidate.
        title: Title from the feed (may be empty for list sources).
        link: Absolute article URL, the candidate's unique key.
        publish_date: Raw publish date string as found in the feed.
        snippet: Plain-text summary from the feed.
        weight: Weight of the originating source.
        score: Ranking score, assigned by the selector.
    """

    source: str
    title: str = ""
    link: str
    publish_date: str | None = None
    snippet: str = ""
    weight: float = 0.0
    score: float = 0.0


class Material(StrictBaseModel):
    """A selected, text-extracted candidate with a citation id.

    ``ref_id`` is dense and 1-based within a run; it is the only citation
    key used by the summary and the rendered document.
    """

    ref_id: Annotated[int, Field(ge=1)]
    source: str
    title: str
    link: str
    publish_date: str | None = None
    text: str
    score: float = 0.0

    @classmethod
    def from_candidate(
        cls, candidate: Candidate, ref_id: int, title: str, text: str
    ) -> "Material":
        """Build a Material from a selected candidate."""
        return cls(
            ref_id=ref_id,
            source=candidate.source,
            title=title,
            link=candidate.link,
            publish_date=candidate.publish_date,
            text=text,
            score=candidate.score,
        )
