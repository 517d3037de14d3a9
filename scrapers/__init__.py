"""
Job posting fetching and field extraction.
"""

from scrapers.base import FetchError, FetchedPage, PageFetcher
from scrapers.job_posting import JobPostingExtractor, scrape_job_posting
from scrapers.page import JobPage
from scrapers.strategies import ExtractionStrategy, StrategyChain, default_strategies

__all__ = [
    "ExtractionStrategy",
    "FetchError",
    "FetchedPage",
    "JobPage",
    "JobPostingExtractor",
    "PageFetcher",
    "StrategyChain",
    "default_strategies",
    "scrape_job_posting",
]
