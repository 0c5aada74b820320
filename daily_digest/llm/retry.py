"""Exponential backoff for rate-limited summarization calls."""

import random
import time
from collections.abc import Callable
from typing import Annotated, TypeVar

import structlog
from pydantic import BaseModel, ConfigDict, Field

from daily_digest.llm.errors import LlmApiError
from daily_digest.observability.metrics import DigestMetrics


logger = structlog.get_logger()

T = TypeVar("T")


class RetryPolicy(BaseModel):
    """Configuration for rate-limit retries.

    Wait before retry ``n`` (1-based):
        min(base_ms * 2 ** (n - 1) + jitter, cap_ms)
    with ``jitter`` drawn uniformly from ``[0, jitter_ms)``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_retries: Annotated[int, Field(ge=0, le=20)] = 6
    base_ms: Annotated[int, Field(ge=0)] = 1500
    cap_ms: Annotated[int, Field(ge=0)] = 20000
    jitter_ms: Annotated[int, Field(ge=0)] = 600

    def wait_ms(self, attempt: int, rng: Callable[[], float] = random.random) -> int:
        """Compute the wait before a retry.

        Args:
            attempt: Retry number, starting at 1.
            rng: Uniform [0, 1) source for the jitter.

        Returns:
            Wait in milliseconds.
        """
        jitter = int(rng() * self.jitter_ms)
        return min(self.base_ms * 2 ** (attempt - 1) + jitter, self.cap_ms)


def is_rate_limit_error(error: BaseException) -> bool:
    """Check whether an error is the service's rate-limit signal."""
    return isinstance(error, LlmApiError) and error.rate_limited


def with_rate_limit_retry(
    fn: Callable[[], T],
    policy: RetryPolicy,
    sleep: Callable[[float], None] = time.sleep,
    rng: Callable[[], float] = random.random,
) -> T:
    """Call ``fn``, retrying only on rate-limit errors.

    Args:
        fn: Zero-argument call to make.
        policy: Backoff configuration.
        sleep: Sleep function taking seconds (injectable for tests).
        rng: Uniform [0, 1) source for the jitter.

    Returns:
        The first successful result of ``fn``.

    Raises:
        LlmApiError: The last rate-limit error once retries are exhausted.
        Exception: Any other error from ``fn``, immediately.
    """
    log = logger.bind(component="llm", subcomponent="retry")
    metrics = DigestMetrics.get_instance()
    attempt = 0
    while True:
        try:
            return fn()
        except LlmApiError as e:
            attempt += 1
            if not is_rate_limit_error(e) or attempt > policy.max_retries:
                raise
            wait_ms = policy.wait_ms(attempt, rng)
            metrics.record_rate_limit_wait()
            log.warning(
                "llm_rate_limited",
                attempt=attempt,
                max_retries=policy.max_retries,
                wait_ms=wait_ms,
                status=e.status_code,
            )
            sleep(wait_ms / 1000.0)
