"""Article text extraction under bounded concurrency."""

from daily_digest.extractor.extractor import ContentExtractor, ExtractionPhaseResult
from daily_digest.extractor.pool import run_with_concurrency
from daily_digest.extractor.readability import ArticleExtraction, extract_article


__all__ = [
    "ArticleExtraction",
    "ContentExtractor",
    "ExtractionPhaseResult",
    "extract_article",
    "run_with_concurrency",
]
