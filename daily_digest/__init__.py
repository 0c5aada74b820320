"""Daily digest: feed aggregation, extraction, summarization and rendering."""

__version__ = "0.1.0"
