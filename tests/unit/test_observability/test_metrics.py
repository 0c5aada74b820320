"""Tests for DigestMetrics."""

import pytest

from daily_digest.observability.metrics import DigestMetrics


@pytest.fixture(autouse=True)
def reset_metrics() -> None:
    """Reset metrics between tests."""
    DigestMetrics.reset()


class TestDigestMetrics:
    """Tests for run counters."""

    def test_singleton_and_reset(self) -> None:
        """get_instance returns one instance until reset."""
        first = DigestMetrics.get_instance()
        assert DigestMetrics.get_instance() is first
        DigestMetrics.reset()
        assert DigestMetrics.get_instance() is not first

    def test_counters(self) -> None:
        """Recorded events show up in to_dict."""
        metrics = DigestMetrics.get_instance()
        metrics.record_source(succeeded=True, items=4)
        metrics.record_source(succeeded=False)
        metrics.record_selected(3)
        metrics.record_extraction(cache_hit=True)
        metrics.record_extraction(cache_hit=False, failed=True)
        metrics.record_llm_call()
        metrics.record_rate_limit_wait()

        assert metrics.to_dict() == {
            "sources_succeeded": 1,
            "sources_failed": 1,
            "candidates_collected": 4,
            "candidates_selected": 3,
            "extraction_cache_hits": 1,
            "extraction_cache_misses": 1,
            "extraction_failures": 1,
            "llm_calls": 1,
            "llm_rate_limit_waits": 1,
        }
