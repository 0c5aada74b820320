"""Source collectors: syndication feeds and HTML list pages."""

from daily_digest.collectors.base import BaseCollector, CollectorResult
from daily_digest.collectors.errors import (
    CollectorError,
    CollectorErrorClass,
    ErrorRecord,
    ParseError,
)
from daily_digest.collectors.html_list import HtmlListCollector
from daily_digest.collectors.rss_atom import RssAtomCollector
from daily_digest.collectors.runner import CollectorRunner, RunnerResult


__all__ = [
    "BaseCollector",
    "CollectorError",
    "CollectorErrorClass",
    "CollectorResult",
    "CollectorRunner",
    "ErrorRecord",
    "HtmlListCollector",
    "ParseError",
    "RssAtomCollector",
    "RunnerResult",
]
