"""Tests for DailySummarizer."""

import json
from zoneinfo import ZoneInfo

import pytest

from daily_digest.llm.constants import NOTICE_FAILED, NOTICE_NO_MATERIAL, NOTICE_SKIPPED
from daily_digest.llm.errors import LlmApiError
from daily_digest.llm.models import DailySummary, SummaryItem, SummaryStatus
from daily_digest.llm.retry import RetryPolicy
from daily_digest.llm.summarizer import DailySummarizer
from daily_digest.observability.metrics import DigestMetrics
from daily_digest.store.hash import compute_materials_fingerprint
from daily_digest.store.models import DailyCacheEntry
from tests.helpers.builders import FakeLlmClient, make_material


RUN_DATE = "2025-01-15"
MATERIALS = [make_material(1), make_material(2)]
GOOD_RESPONSE = json.dumps(
    {
        "overview": [{"title": "要点", "summary": "内容", "refs": [1]}],
        "important": [
            {"title": "重点", "summary": "说明", "importance_reason": "原因", "refs": [2]}
        ],
        "ref_translations": [{"id": 1, "zh_title": "标题一"}],
    },
    ensure_ascii=False,
)


@pytest.fixture(autouse=True)
def reset_metrics() -> None:
    """Reset metrics between tests."""
    DigestMetrics.reset()


def make_summarizer(
    client: FakeLlmClient | None, sleeps: list[float] | None = None
) -> DailySummarizer:
    """Create a summarizer with recorded sleeps and no jitter."""
    recorded = sleeps if sleeps is not None else []
    return DailySummarizer(
        client=client,
        tz=ZoneInfo("UTC"),
        run_id="run",
        retry_policy=RetryPolicy(max_retries=2),
        min_interval_ms=3000,
        sleep=recorded.append,
        rng=lambda: 0.0,
    )


class TestNoCall:
    """Paths that never call the service."""

    def test_empty_materials(self) -> None:
        """No materials: empty summary with a notice."""
        client = FakeLlmClient()

        outcome = make_summarizer(client).summarize([], RUN_DATE, {})

        assert outcome.status == SummaryStatus.EMPTY
        assert outcome.daily.notice == NOTICE_NO_MATERIAL
        assert client.calls == []

    def test_skip(self) -> None:
        """Skipping produces the skipped notice."""
        client = FakeLlmClient()

        outcome = make_summarizer(client).summarize(MATERIALS, RUN_DATE, {}, skip=True)

        assert outcome.status == SummaryStatus.SKIPPED
        assert outcome.daily.notice == NOTICE_SKIPPED
        assert client.calls == []

    def test_cache_reuse_makes_zero_calls(self) -> None:
        """A matching fingerprint reuses the cached summary."""
        cached_daily = DailySummary(
            overview=[SummaryItem(title="cached", summary="s", refs=[1])]
        )
        cache = {
            RUN_DATE: DailyCacheEntry(
                fingerprint=compute_materials_fingerprint(MATERIALS),
                daily=cached_daily,
                saved_at=RUN_DATE,
            )
        }
        client = FakeLlmClient()
        sleeps: list[float] = []

        outcome = make_summarizer(client, sleeps).summarize(MATERIALS, RUN_DATE, cache)

        assert outcome.status == SummaryStatus.CACHED
        assert outcome.daily == cached_daily
        assert outcome.cache_entry is None
        assert client.calls == []
        assert sleeps == []
        assert DigestMetrics.get_instance().llm_calls == 0


class TestGenerate:
    """Paths that call the service."""

    def test_generates_and_returns_cache_entry(self) -> None:
        """A good response is normalized and cached."""
        client = FakeLlmClient([GOOD_RESPONSE])
        sleeps: list[float] = []

        outcome = make_summarizer(client, sleeps).summarize(MATERIALS, RUN_DATE, {})

        assert outcome.status == SummaryStatus.GENERATED
        assert outcome.daily.important[0].title == "重点"
        assert outcome.daily.ref_translations == {1: "标题一"}
        assert outcome.cache_entry is not None
        assert outcome.cache_entry.fingerprint == compute_materials_fingerprint(
            MATERIALS
        )
        assert outcome.cache_entry.saved_at == RUN_DATE
        assert len(client.calls) == 1
        assert sleeps == [3.0]

    def test_unparseable_ref_keeps_other_items(self) -> None:
        """A superscript ref drops its own item; the summary is still generated."""
        response = json.dumps(
            {
                "overview": [
                    {"title": "A", "summary": "a", "refs": [1]},
                    {"title": "B", "summary": "b", "refs": ["\u00b2"]},
                ]
            }
        )
        client = FakeLlmClient([response])

        outcome = make_summarizer(client).summarize(MATERIALS, RUN_DATE, {})

        assert outcome.status == SummaryStatus.GENERATED
        assert [item.title for item in outcome.daily.overview] == ["A"]

    def test_stale_fingerprint_regenerates(self) -> None:
        """A cache entry for different materials is not reused."""
        cache = {
            RUN_DATE: DailyCacheEntry(
                fingerprint="different", daily=DailySummary(), saved_at=RUN_DATE
            )
        }
        client = FakeLlmClient([GOOD_RESPONSE])

        outcome = make_summarizer(client).summarize(MATERIALS, RUN_DATE, cache)

        assert outcome.status == SummaryStatus.GENERATED
        assert len(client.calls) == 1

    def test_force_ignores_cache(self) -> None:
        """Forcing regenerates despite a matching entry."""
        cache = {
            RUN_DATE: DailyCacheEntry(
                fingerprint=compute_materials_fingerprint(MATERIALS),
                daily=DailySummary(),
                saved_at=RUN_DATE,
            )
        }
        client = FakeLlmClient([GOOD_RESPONSE])

        outcome = make_summarizer(client).summarize(
            MATERIALS, RUN_DATE, cache, force=True
        )

        assert outcome.status == SummaryStatus.GENERATED

    def test_rate_limit_then_success(self) -> None:
        """Rate limits are retried with backoff after the courtesy delay."""
        client = FakeLlmClient(
            [LlmApiError("429", status_code=429, rate_limited=True), GOOD_RESPONSE]
        )
        sleeps: list[float] = []

        outcome = make_summarizer(client, sleeps).summarize(MATERIALS, RUN_DATE, {})

        assert outcome.status == SummaryStatus.GENERATED
        assert sleeps == [3.0, 1.5, 3.0]
        assert DigestMetrics.get_instance().llm_calls == 2

    def test_exhausted_rate_limits_degrade(self) -> None:
        """Persistent rate limits give a failed outcome, not an exception."""
        client = FakeLlmClient(
            [LlmApiError("429", status_code=429, rate_limited=True)] * 3
        )

        outcome = make_summarizer(client).summarize(MATERIALS, RUN_DATE, {})

        assert outcome.status == SummaryStatus.FAILED
        assert outcome.daily.notice == NOTICE_FAILED
        assert outcome.daily.is_empty
        assert outcome.cache_entry is None
        assert len(client.calls) == 3

    def test_malformed_response_degrades(self) -> None:
        """A non-JSON response gives a failed outcome without retrying."""
        client = FakeLlmClient(["I cannot help with that."])

        outcome = make_summarizer(client).summarize(MATERIALS, RUN_DATE, {})

        assert outcome.status == SummaryStatus.FAILED
        assert len(client.calls) == 1

    def test_missing_client_degrades(self) -> None:
        """Without a client the summary fails gracefully."""
        outcome = make_summarizer(None).summarize(MATERIALS, RUN_DATE, {})
        assert outcome.status == SummaryStatus.FAILED
