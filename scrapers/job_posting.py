"""
Job posting extractor.

Fetches a job posting URL and extracts the title, company, location and
description. Every expected failure (network, HTTP status, content type,
unparseable markup, nothing found) is reported through ScrapeResult.error;
callers always get a result back, with whatever fields were recovered.
"""

import time
from typing import Callable, Optional, Union

import structlog
from bs4 import ParserRejectedMarkup

from config.settings import settings
from models.scrape_result import JobField, REQUIRED_FIELDS, ScrapeResult
from scrapers.base import FetchError, PageFetcher
from scrapers.page import JobPage
from scrapers.strategies import ExtractionStrategy, StrategyChain, default_strategies

logger = structlog.get_logger()


def required_fields_from_settings() -> tuple[JobField, ...]:
    """Resolve settings.scrape_required_fields, falling back to REQUIRED_FIELDS."""
    fields = []
    for name in settings.scrape_required_fields:
        try:
            fields.append(JobField(name))
        except ValueError:
            logger.warning("Unknown required field in settings", field=name)
    return tuple(fields) or REQUIRED_FIELDS


class JobPostingExtractor:
    """
    Extracts structured job posting fields from a URL.

    Holds no per-request state, so one instance can serve concurrent calls.
    """

    def __init__(
        self,
        strategies: Optional[list[ExtractionStrategy]] = None,
        required_fields: Optional[tuple[JobField, ...]] = None,
        fetcher_factory: Callable[[], PageFetcher] = PageFetcher,
        max_description_length: Optional[int] = None,
    ):
        self.chain = StrategyChain(
            strategies if strategies is not None else default_strategies(),
            max_description_length=max_description_length,
        )
        self.required_fields = required_fields or required_fields_from_settings()
        self.fetcher_factory = fetcher_factory

    async def extract(self, url: str) -> ScrapeResult:
        """
        Fetch `url` and extract job posting fields.

        Args:
            url: Absolute http(s) URL, already validated by the caller.

        Returns:
            ScrapeResult; never raises for fetch or extraction failures.
        """
        start_time = time.time()
        log = logger.bind(url=url)
        log.info("Scraping job posting")

        try:
            async with self.fetcher_factory() as fetcher:
                fetched = await fetcher.fetch(url)
        except FetchError as e:
            log.warning("Fetch failed", kind=e.kind, error=str(e))
            result = ScrapeResult.failure(url, str(e))
            result.duration_seconds = time.time() - start_time
            return result

        result = self.extract_from_html(fetched.content, fetched.url, encoding=fetched.encoding)
        result.url = url
        result.final_url = fetched.url
        result.duration_seconds = time.time() - start_time

        log.info(
            "Scrape complete",
            success=result.success,
            missing=[job_field.value for job_field in result.missing_fields],
            truncated=fetched.truncated,
            duration_seconds=round(result.duration_seconds, 3),
        )
        return result

    def extract_from_html(
        self,
        content: Union[bytes, str],
        url: str,
        encoding: Optional[str] = None,
    ) -> ScrapeResult:
        """
        Extract fields from markup that has already been fetched.

        Args:
            content: Page markup.
            url: Page URL; its host selects site-specific selectors.
            encoding: Charset from the response headers, if any.

        Returns:
            ScrapeResult with success set from the required fields.
        """
        try:
            page = JobPage.parse(content, url, encoding=encoding)
        except ParserRejectedMarkup as e:
            logger.warning("Markup rejected by parser", url=url, error=str(e))
            return ScrapeResult.failure(url, "Could not parse the page markup")

        result = ScrapeResult(url=url)
        for job_field in JobField:
            match = self.chain.resolve(job_field, page)
            if match:
                result.set_field(job_field, match.value, match.strategy)

        result.success = result.has_fields(self.required_fields)
        if not result.success:
            missing = [job_field.label for job_field in self.required_fields if not result.get(job_field)]
            result.error = (
                f"Could not find {' or '.join(missing)} on the page. "
                "The site may require JavaScript or sign-in; please fill in the details manually."
            )
        return result


async def scrape_job_posting(url: str) -> ScrapeResult:
    """Extract a job posting with the default strategies and settings."""
    return await JobPostingExtractor().extract(url)
