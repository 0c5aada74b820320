"""Collector runner with failure isolation."""

import time
from dataclasses import dataclass, field

import structlog

from daily_digest.collectors.base import BaseCollector, CollectorResult
from daily_digest.collectors.errors import CollectorErrorClass, ErrorRecord
from daily_digest.collectors.html_list import HtmlListCollector
from daily_digest.collectors.rss_atom import RssAtomCollector
from daily_digest.config.schemas.sources import SourceConfig, SourceType
from daily_digest.data_model.models import Candidate
from daily_digest.fetch.client import HttpFetcher
from daily_digest.observability.metrics import DigestMetrics


logger = structlog.get_logger()


@dataclass
class SourceRunResult:
    """Result of running a collector for a single source."""

    source_name: str
    method: str
    result: CollectorResult
    duration_ms: float = 0.0


@dataclass
class RunnerResult:
    """Result of a complete runner execution.

    ``candidates`` is the concatenation of every source's candidates in
    configuration order.
    """

    candidates: list[Candidate] = field(default_factory=list)
    source_results: list[SourceRunResult] = field(default_factory=list)
    sources_succeeded: int = 0
    sources_failed: int = 0


class CollectorRunner:
    """Runs collectors for all sources in configuration order.

    One source failing (fetch error, malformed content, or an unexpected
    exception in its collector) never stops the others.
    """

    def __init__(self, http_client: HttpFetcher, run_id: str) -> None:
        """Initialize the collector runner.

        Args:
            http_client: HTTP client for fetching.
            run_id: Unique run identifier.
        """
        self._http_client = http_client
        self._run_id = run_id
        self._metrics = DigestMetrics.get_instance()
        self._log = logger.bind(component="runner", run_id=run_id)
        self._collectors: dict[SourceType, BaseCollector] = {
            SourceType.FEED: RssAtomCollector(run_id),
            SourceType.LIST: HtmlListCollector(run_id),
        }

    def run(self, sources: list[SourceConfig]) -> RunnerResult:
        """Run collectors for all sources.

        Args:
            sources: Validated source configurations.

        Returns:
            RunnerResult with the concatenated candidates.
        """
        self._log.info("runner_started", source_count=len(sources))
        runner_result = RunnerResult()

        for source in sources:
            source_result = self._run_single_source(source)
            runner_result.source_results.append(source_result)
            if source_result.result.success:
                runner_result.sources_succeeded += 1
                runner_result.candidates.extend(source_result.result.candidates)
            else:
                runner_result.sources_failed += 1

        self._log.info(
            "runner_complete",
            total_candidates=len(runner_result.candidates),
            sources_succeeded=runner_result.sources_succeeded,
            sources_failed=runner_result.sources_failed,
        )
        return runner_result

    def _run_single_source(self, source: SourceConfig) -> SourceRunResult:
        """Run the collector for a single source.

        Args:
            source: Source configuration.

        Returns:
            SourceRunResult with candidates or the error record.
        """
        start_time_ns = time.perf_counter_ns()
        log = self._log.bind(source=source.name, method=source.type.value)
        log.info("source_started")

        collector = self._collectors[source.type]
        try:
            result = collector.collect(source, self._http_client)
        except Exception as e:  # noqa: BLE001
            log.error("source_execution_error", error=str(e))
            result = CollectorResult(
                candidates=[],
                error=ErrorRecord(
                    error_class=CollectorErrorClass.PARSE,
                    message=f"Execution error: {e}",
                    source_name=source.name,
                ),
            )

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        self._metrics.record_source(result.success, result.candidates_count)

        if result.success:
            log.info(
                "source_complete",
                candidates=result.candidates_count,
                duration_ms=round(duration_ms, 2),
            )
        else:
            log.warning(
                "source_failed",
                error_class=result.error.error_class.value if result.error else None,
                error=result.error.message if result.error else None,
                duration_ms=round(duration_ms, 2),
            )

        return SourceRunResult(
            source_name=source.name,
            method=source.type.value,
            result=result,
            duration_ms=duration_ms,
        )
