"""Crawling: page models, URL frontier, browser-backed page fetching."""

from actionscout.crawler.frontier import CrawlFrontier, normalize_url
from actionscout.crawler.models import (
    CrawlConfig,
    CrawlReport,
    CrawlResult,
    Element,
    PageAnalysis,
    Position,
)

__all__ = [
    "CrawlConfig",
    "CrawlFrontier",
    "CrawlReport",
    "CrawlResult",
    "Element",
    "PageAnalysis",
    "Position",
    "normalize_url",
]
