"""Daily summarization phase: one model call per distinct material set."""

import random
import time
from collections.abc import Callable, Mapping
from datetime import tzinfo

import structlog

from daily_digest.data_model.models import Material
from daily_digest.llm.constants import (
    NOTICE_FAILED,
    NOTICE_NO_MATERIAL,
    NOTICE_SKIPPED,
)
from daily_digest.llm.errors import LlmAuthError
from daily_digest.llm.json_utils import parse_json_object
from daily_digest.llm.models import DailySummary, SummaryOutcome, SummaryStatus
from daily_digest.llm.normalize import normalize_daily_summary
from daily_digest.llm.prompts import SYSTEM_INSTRUCTION, build_daily_prompt
from daily_digest.llm.protocols import LlmClient
from daily_digest.llm.retry import RetryPolicy, with_rate_limit_retry
from daily_digest.observability.metrics import DigestMetrics
from daily_digest.store.hash import compute_materials_fingerprint
from daily_digest.store.models import DailyCacheEntry


logger = structlog.get_logger()


class DailySummarizer:
    """Produces the DailySummary for a run.

    Decision order:
        1. No materials -> EMPTY (no call)
        2. Summarization disabled -> SKIPPED (no call)
        3. Daily cache entry for the run date with the same fingerprint,
           unless forced -> CACHED (no call)
        4. Otherwise one call, retried only on rate limits -> GENERATED,
           or FAILED with an empty summary carrying a notice.
    """

    def __init__(  # noqa: PLR0913
        self,
        client: LlmClient | None,
        tz: tzinfo,
        run_id: str,
        retry_policy: RetryPolicy | None = None,
        min_interval_ms: int = 3000,
        sleep: Callable[[float], None] = time.sleep,
        rng: Callable[[], float] = random.random,
    ) -> None:
        """Initialize the summarizer.

        Args:
            client: LLM client; may be None when no call will be made.
            tz: Run timezone for publish dates in the request.
            run_id: Run identifier for logging.
            retry_policy: Backoff configuration for rate limits.
            min_interval_ms: Courtesy delay before each call attempt.
            sleep: Sleep function taking seconds (injectable for tests).
            rng: Uniform [0, 1) source for backoff jitter.
        """
        self._client = client
        self._tz = tz
        self._policy = retry_policy or RetryPolicy()
        self._min_interval_ms = min_interval_ms
        self._sleep = sleep
        self._rng = rng
        self._metrics = DigestMetrics.get_instance()
        self._log = logger.bind(component="llm", subcomponent="summarizer", run_id=run_id)

    def summarize(
        self,
        materials: list[Material],
        run_date: str,
        daily_cache: Mapping[str, DailyCacheEntry],
        *,
        skip: bool = False,
        force: bool = False,
    ) -> SummaryOutcome:
        """Summarize the run's materials.

        Args:
            materials: Final materials of the run.
            run_date: Run date, the daily cache key.
            daily_cache: Daily cache snapshot keyed by run date.
            skip: Do not call the service.
            force: Ignore a matching daily cache entry.

        Returns:
            SummaryOutcome; never raises for service failures.
        """
        if not materials:
            self._log.info("summary_empty")
            return SummaryOutcome(
                daily=DailySummary.empty(NOTICE_NO_MATERIAL),
                status=SummaryStatus.EMPTY,
            )

        if skip:
            self._log.info("summary_skipped")
            return SummaryOutcome(
                daily=DailySummary.empty(NOTICE_SKIPPED),
                status=SummaryStatus.SKIPPED,
            )

        fingerprint = compute_materials_fingerprint(materials)
        cached = daily_cache.get(run_date)
        if not force and cached is not None and cached.fingerprint == fingerprint:
            self._log.info("summary_cache_hit", run_date=run_date)
            return SummaryOutcome(
                daily=cached.daily,
                status=SummaryStatus.CACHED,
                fingerprint=fingerprint,
            )

        try:
            daily = self._generate(materials)
        except Exception as e:  # noqa: BLE001
            self._log.warning(
                "summary_failed",
                error_type=type(e).__name__,
                error=str(e)[:500],
            )
            return SummaryOutcome(
                daily=DailySummary.empty(NOTICE_FAILED),
                status=SummaryStatus.FAILED,
                fingerprint=fingerprint,
                error=str(e),
            )

        self._log.info(
            "summary_generated",
            overview=len(daily.overview),
            important=len(daily.important),
            notice=daily.notice,
        )
        return SummaryOutcome(
            daily=daily,
            status=SummaryStatus.GENERATED,
            fingerprint=fingerprint,
            cache_entry=DailyCacheEntry(
                fingerprint=fingerprint, daily=daily, saved_at=run_date
            ),
        )

    def _generate(self, materials: list[Material]) -> DailySummary:
        """Call the service (with rate-limit retries) and normalize the result.

        Raises:
            LlmAuthError: If no client is configured.
            LlmApiError: On non-retryable or exhausted rate-limit failures.
            LlmProcessingError: If the response is not a JSON object.
        """
        if self._client is None:
            msg = "No LLM client configured"
            raise LlmAuthError(msg)

        client = self._client
        prompt = build_daily_prompt(materials, self._tz)

        def attempt() -> str:
            if self._min_interval_ms > 0:
                self._sleep(self._min_interval_ms / 1000.0)
            self._metrics.record_llm_call()
            self._log.info("llm_call", materials=len(materials), prompt_chars=len(prompt))
            return client.generate_content(prompt, system_instruction=SYSTEM_INSTRUCTION)

        content = with_rate_limit_retry(
            attempt, self._policy, sleep=self._sleep, rng=self._rng
        )
        return normalize_daily_summary(parse_json_object(content), materials)
