"""Configuration model for the HTTP fetch layer."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from daily_digest.fetch.constants import (
    DEFAULT_MAX_RESPONSE_SIZE_BYTES,
    DEFAULT_USER_AGENT,
)


class FetchConfig(BaseModel):
    """Configuration for the HTTP fetch layer.

    Feeds and article pages get separate time budgets; callers pick one
    per request.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        DEFAULT_USER_AGENT
    )
    feed_timeout_seconds: Annotated[float, Field(gt=0, le=600.0)] = 120.0
    page_timeout_seconds: Annotated[float, Field(gt=0, le=600.0)] = 25.0
    max_response_size_bytes: Annotated[int, Field(ge=1024, le=100 * 1024 * 1024)] = (
        DEFAULT_MAX_RESPONSE_SIZE_BYTES
    )
