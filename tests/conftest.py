"""
Pytest configuration and fixtures for Job Posting Extractor tests.
"""

import os
import sys
from pathlib import Path

import httpx
import pytest

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Fast, quiet settings before importing any modules
os.environ['SCRAPE_RETRY_WAIT_SECONDS'] = '0'
os.environ['LOG_LEVEL'] = 'WARNING'

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def fixture_html():
    """Return a loader for HTML files in tests/fixtures."""
    return load_fixture


@pytest.fixture
def html_transport():
    """
    Build an httpx.MockTransport serving fixed HTML pages.

    Usage:
        transport, calls = html_transport({"https://example.com/job": "<html>..."})
    """
    def build(pages: dict, content_type: str = "text/html; charset=utf-8"):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(str(request.url))
            body = pages.get(str(request.url))
            if body is None:
                return httpx.Response(404, text="Not Found")
            return httpx.Response(200, text=body, headers={"content-type": content_type})

        return httpx.MockTransport(handler), calls

    return build


@pytest.fixture
def extractor_for():
    """Return a factory for extractors whose fetcher uses the given transport."""
    from scrapers.base import PageFetcher
    from scrapers.job_posting import JobPostingExtractor

    def build(transport: httpx.AsyncBaseTransport, **fetcher_options):
        return JobPostingExtractor(
            fetcher_factory=lambda: PageFetcher(transport=transport, retry_wait=0, **fetcher_options),
        )

    return build


# Markers for test categories
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "live: marks tests that make real network calls")
    config.addinivalue_line("markers", "integration: marks integration tests")
    config.addinivalue_line("markers", "slow: marks slow tests")
