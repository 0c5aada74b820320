"""CLI commands for the daily digest generator."""

import logging
import sys
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, tzinfo
from pathlib import Path

import click
import httpx
import structlog
from pydantic import ValidationError

from daily_digest.collectors.runner import CollectorRunner, RunnerResult
from daily_digest.config.errors import (
    ConfigValidationError,
    MissingApiKeyError,
    SetupError,
)
from daily_digest.config.loader import load_sources_file
from daily_digest.config.schemas.sources import SourcesFile
from daily_digest.data_model.dates import (
    InvalidRunDateError,
    resolve_run_date,
    resolve_timezone,
)
from daily_digest.data_model.models import Candidate
from daily_digest.extractor.extractor import ContentExtractor, ExtractionPhaseResult
from daily_digest.fetch.client import HttpFetcher
from daily_digest.fetch.config import FetchConfig
from daily_digest.llm.client import ZhipuChatClient
from daily_digest.llm.models import SummaryOutcome
from daily_digest.llm.protocols import LlmClient
from daily_digest.llm.retry import RetryPolicy
from daily_digest.llm.summarizer import DailySummarizer
from daily_digest.observability.logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
)
from daily_digest.observability.metrics import DigestMetrics
from daily_digest.ranker.filters import filter_candidates
from daily_digest.ranker.scorer import select_candidates
from daily_digest.renderer.io import AtomicWriter
from daily_digest.renderer.markdown_renderer import DigestDocumentBuilder
from daily_digest.settings.app import AppSettings, get_settings
from daily_digest.store.cache import CacheStore
from daily_digest.store.models import DigestCache


logger = structlog.get_logger()

DEFAULT_CONFIG_PATH = Path("sources.yml")
DEFAULT_POSTS_DIR = Path("source") / "_posts"
DEFAULT_CACHE_PATH = Path("data") / "digest-cache.json"


@dataclass
class RunOptions:
    """Options for the run command.

    Flags are OR-combined with their environment counterparts; ``date``
    and ``timezone`` take precedence over the environment when given.
    """

    config_path: Path = DEFAULT_CONFIG_PATH
    posts_dir: Path = DEFAULT_POSTS_DIR
    cache_path: Path = DEFAULT_CACHE_PATH
    date: str | None = None
    timezone: str | None = None
    dry_run: bool = False
    skip_llm: bool = False
    force_llm: bool = False
    json_logs: bool = True
    verbose: bool = False


@dataclass
class RunReport:
    """Outcome of one digest run."""

    run_id: str
    run_date: str
    document: str
    output_path: Path
    written: bool
    summary: SummaryOutcome
    candidates_collected: int = 0
    candidates_selected: int = 0
    materials: int = 0
    metrics: dict[str, int] = field(default_factory=dict)


def _effective_settings(options: RunOptions, settings: AppSettings) -> AppSettings:
    """Apply CLI overrides on top of environment settings."""
    return settings.model_copy(
        update={
            "dry_run": settings.dry_run or options.dry_run,
            "skip_llm": settings.skip_llm or options.skip_llm,
            "force_llm": settings.force_llm or options.force_llm,
            "digest_date": options.date or settings.digest_date,
            "digest_tz": options.timezone or settings.digest_tz,
        }
    )


def _run_collection_phase(
    fetcher: HttpFetcher,
    sources_file: SourcesFile,
    run_id: str,
    log: structlog.typing.FilteringBoundLogger,
) -> RunnerResult:
    """Execute the ingestion phase over every configured source."""
    log.info("phase_started", phase="collection", sources=len(sources_file.sources))
    runner_result = CollectorRunner(http_client=fetcher, run_id=run_id).run(
        sources_file.sources
    )
    log.info(
        "collection_complete",
        total_candidates=len(runner_result.candidates),
        sources_succeeded=runner_result.sources_succeeded,
        sources_failed=runner_result.sources_failed,
    )
    return runner_result


def _run_selection_phase(
    candidates: list[Candidate],
    sources_file: SourcesFile,
    settings: AppSettings,
    now: datetime,
    log: structlog.typing.FilteringBoundLogger,
) -> list[Candidate]:
    """Filter, score and keep the candidates sent to extraction."""
    lookback_days = settings.lookback_days or sources_file.lookback_days
    log.info(
        "phase_started",
        phase="selection",
        lookback_days=lookback_days,
        prefetch_count=settings.prefetch_count,
    )
    filtered = filter_candidates(candidates, now=now, lookback_days=lookback_days)
    selected = select_candidates(
        filtered, sources_file.boost_keywords, settings.prefetch_count
    )
    DigestMetrics.get_instance().record_selected(len(selected))
    return selected


def _run_extraction_phase(  # noqa: PLR0913
    fetcher: HttpFetcher,
    selected: list[Candidate],
    cache: DigestCache,
    settings: AppSettings,
    run_date: str,
    run_id: str,
    log: structlog.typing.FilteringBoundLogger,
) -> ExtractionPhaseResult:
    """Turn selected candidates into numbered materials."""
    log.info("phase_started", phase="extraction", candidates=len(selected))
    extractor = ContentExtractor(
        fetcher=fetcher,
        run_id=run_id,
        concurrency=settings.fetch_concurrency,
        per_article_max_chars=settings.per_article_max_chars,
        min_text_chars=settings.min_text_chars,
        top_n=settings.top_n,
    )
    return extractor.extract(selected, cache.fetched, run_date)


def _run_summary_phase(  # noqa: PLR0913
    extraction: ExtractionPhaseResult,
    cache: DigestCache,
    settings: AppSettings,
    tz: tzinfo,
    run_date: str,
    run_id: str,
    llm_client: LlmClient | None,
    transport: httpx.BaseTransport | None,
    sleep: Callable[[float], None],
    log: structlog.typing.FilteringBoundLogger,
) -> SummaryOutcome:
    """Produce the daily summary, reusing the daily cache when possible."""
    log.info(
        "phase_started",
        phase="summary",
        materials=len(extraction.materials),
        enabled=settings.summarization_enabled,
    )
    client = llm_client
    if client is None and settings.summarization_enabled and settings.zhipu_api_key:
        client = ZhipuChatClient(
            api_key=settings.zhipu_api_key,
            model=settings.zhipu_model,
            timeout=settings.llm_timeout_seconds,
            transport=transport,
        )

    summarizer = DailySummarizer(
        client=client,
        tz=tz,
        run_id=run_id,
        retry_policy=RetryPolicy(
            max_retries=settings.llm_max_retries,
            base_ms=settings.llm_backoff_base_ms,
            cap_ms=settings.llm_backoff_cap_ms,
            jitter_ms=settings.llm_backoff_jitter_ms,
        ),
        min_interval_ms=settings.llm_min_interval_ms,
        sleep=sleep,
    )
    outcome = summarizer.summarize(
        extraction.materials,
        run_date,
        cache.daily,
        skip=not settings.summarization_enabled,
        force=settings.force_llm,
    )
    log.info("summary_phase_complete", status=outcome.status.value)
    return outcome


def execute_run(  # noqa: PLR0913
    options: RunOptions,
    settings: AppSettings,
    *,
    transport: httpx.BaseTransport | None = None,
    llm_client: LlmClient | None = None,
    sleep: Callable[[float], None] = time.sleep,
    now: datetime | None = None,
) -> RunReport:
    """Execute one digest run.

    Phases: setup, collection, selection, extraction, summary, rendering,
    persistence. Only setup failures raise; every later failure degrades
    the document instead of aborting it.

    Args:
        options: CLI options.
        settings: Environment settings.
        transport: Optional httpx transport for every fetch and for the
            Zhipu client.
        llm_client: Optional summarization client used instead of the
            Zhipu client.
        sleep: Sleep function for the courtesy delay and backoff.
        now: Current instant (defaults to the system clock).

    Returns:
        RunReport describing the produced document.

    Raises:
        SetupError: On a missing or invalid config file or a missing API key.
        InvalidRunDateError: If the run-date override is malformed.
    """
    run_id = str(uuid.uuid4())
    current = now or datetime.now(UTC)
    settings = _effective_settings(options, settings)

    configure_logging(
        level=logging.DEBUG if options.verbose else logging.INFO,
        json_format=options.json_logs,
    )
    DigestMetrics.reset()
    bind_run_context(run_id)

    log = logger.bind(component="cli", command="run", run_id=run_id)

    try:
        tz = resolve_timezone(settings.digest_tz)
        run_date = resolve_run_date(settings.digest_date, tz, now=current)
        bind_run_context(run_id, run_date)
        log.info(
            "digest_run_started",
            run_date=run_date,
            config_path=str(options.config_path),
            posts_dir=str(options.posts_dir),
            cache_path=str(options.cache_path),
            dry_run=settings.dry_run,
            summarization_enabled=settings.summarization_enabled,
        )

        sources_file = load_sources_file(options.config_path)
        if (
            settings.summarization_enabled
            and llm_client is None
            and not settings.zhipu_api_key
        ):
            raise MissingApiKeyError

        today = date.fromisoformat(run_date)
        cache_store = CacheStore(options.cache_path, run_id=run_id)
        cache = cache_store.load().pruned(
            today, settings.cache_retention_days, settings.daily_retention_days
        )

        fetcher = HttpFetcher(
            config=FetchConfig(
                feed_timeout_seconds=settings.feed_timeout_seconds,
                page_timeout_seconds=settings.page_timeout_seconds,
            ),
            run_id=run_id,
            transport=transport,
        )

        runner_result = _run_collection_phase(fetcher, sources_file, run_id, log)
        selected = _run_selection_phase(
            runner_result.candidates, sources_file, settings, current, log
        )
        extraction = _run_extraction_phase(
            fetcher, selected, cache, settings, run_date, run_id, log
        )
        outcome = _run_summary_phase(
            extraction,
            cache,
            settings,
            tz,
            run_date,
            run_id,
            llm_client,
            transport,
            sleep,
            log,
        )

        document = DigestDocumentBuilder(post_time=settings.digest_post_time).build(
            run_date, outcome.daily, extraction.materials
        )
        output_path = options.posts_dir / f"digest-{run_date}.md"

        if settings.dry_run:
            log.info(
                "dry_run_skip_write",
                output_path=str(output_path),
                document_chars=len(document),
            )
        else:
            AtomicWriter(run_id).write(output_path, document)
            daily_delta = (
                {run_date: outcome.cache_entry} if outcome.cache_entry else None
            )
            cache_store.save(
                cache.merged(extraction.fetched_delta, daily_delta).pruned(
                    today,
                    settings.cache_retention_days,
                    settings.daily_retention_days,
                )
            )
            log.info("digest_written", output_path=str(output_path))

        metrics = DigestMetrics.get_instance().to_dict()
        log.info("run_metrics", **metrics)
        log.info("digest_run_complete", summary_status=outcome.status.value)

        return RunReport(
            run_id=run_id,
            run_date=run_date,
            document=document,
            output_path=output_path,
            written=not settings.dry_run,
            summary=outcome,
            candidates_collected=len(runner_result.candidates),
            candidates_selected=len(selected),
            materials=len(extraction.materials),
            metrics=metrics,
        )
    finally:
        clear_run_context()


def _echo_setup_error(error: Exception) -> None:
    """Print a setup failure to stderr."""
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, ConfigValidationError):
        for detail in error.errors:
            click.echo(f"  - {detail['loc']}: {detail['msg']}", err=True)


@click.group()
@click.version_option(version="0.1.0")
def cli() -> None:
    """Daily digest generator CLI."""


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to the sources YAML file.",
)
@click.option(
    "--posts-dir",
    "posts_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_POSTS_DIR,
    show_default=True,
    help="Directory the digest post is written to.",
)
@click.option(
    "--cache",
    "cache_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_CACHE_PATH,
    show_default=True,
    help="Path to the JSON cache file.",
)
@click.option(
    "--date",
    "run_date",
    type=str,
    default=None,
    help="Run date override (YYYY-MM-DD). Overrides DIGEST_DATE.",
)
@click.option(
    "--tz",
    "timezone",
    type=str,
    default=None,
    help="Run timezone (e.g., Asia/Shanghai). Overrides DIGEST_TZ.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Compute everything but write nothing.",
)
@click.option(
    "--skip-llm",
    is_flag=True,
    help="Do not call the summarization service.",
)
@click.option(
    "--force-llm",
    is_flag=True,
    help="Ignore a cached daily summary with a matching fingerprint.",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=True,
    help="Use JSON format for logs (default: true).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
def run(  # noqa: PLR0913
    config_path: Path,
    posts_dir: Path,
    cache_path: Path,
    run_date: str | None,
    timezone: str | None,
    dry_run: bool,
    skip_llm: bool,
    force_llm: bool,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Generate the daily digest post.

    Collects candidates from every configured source, extracts article
    text, summarizes it in one model call and writes a Markdown post.
    Source, extraction and model failures degrade the post; only setup
    failures exit non-zero.
    """
    options = RunOptions(
        config_path=config_path,
        posts_dir=posts_dir,
        cache_path=cache_path,
        date=run_date,
        timezone=timezone,
        dry_run=dry_run,
        skip_llm=skip_llm,
        force_llm=force_llm,
        json_logs=json_logs,
        verbose=verbose,
    )

    try:
        settings = get_settings()
    except ValidationError as e:
        click.echo(f"Error: invalid settings: {e}", err=True)
        sys.exit(1)

    try:
        report = execute_run(options, settings)
    except (SetupError, InvalidRunDateError) as e:
        _echo_setup_error(e)
        sys.exit(1)

    if report.written:
        click.echo(f"Digest written: {report.output_path}")
    else:
        click.echo(
            f"Dry run: would write {report.output_path} "
            f"({len(report.document)} chars)"
        )


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to the sources YAML file.",
)
def validate(config_path: Path) -> None:
    """Validate the sources file without running the pipeline."""
    configure_logging(json_format=False)

    try:
        sources_file = load_sources_file(config_path)
    except SetupError as e:
        _echo_setup_error(e)
        sys.exit(1)

    click.echo("Configuration is valid!")
    click.echo(f"  Sources: {len(sources_file.sources)}")
    click.echo(f"  Lookback days: {sources_file.lookback_days}")
    keywords = ", ".join(sources_file.boost_keywords) or "(none)"
    click.echo(f"  Boost keywords: {keywords}")
