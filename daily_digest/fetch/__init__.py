"""HTTP fetch layer with bounded time, bounded size and failure isolation."""

from daily_digest.fetch.client import HttpFetcher
from daily_digest.fetch.config import FetchConfig
from daily_digest.fetch.constants import FEED_ACCEPT, HTML_ACCEPT
from daily_digest.fetch.models import FetchError, FetchErrorClass, FetchResult


__all__ = [
    "FEED_ACCEPT",
    "HTML_ACCEPT",
    "FetchConfig",
    "FetchError",
    "FetchErrorClass",
    "FetchResult",
    "HttpFetcher",
]
