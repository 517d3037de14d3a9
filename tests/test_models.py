"""
Model tests - request validation and result serialization.

Run with: pytest tests/test_models.py -v
"""

import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import pytest
from pydantic import ValidationError

from models.scrape_request import ScrapeRequest
from models.scrape_result import JobField, REQUIRED_FIELDS, ScrapeResult


class TestScrapeRequest:
    """Test URL validation."""

    @pytest.mark.parametrize("url", [
        "https://example.com/jobs/1",
        "http://localhost:8000/job?id=5",
        "https://www.linkedin.com/jobs/view/123456/",
    ])
    def test_valid_urls(self, url):
        assert ScrapeRequest(url=url).url == url

    def test_url_kept_as_sent(self):
        """Validation must not normalize the URL that gets fetched."""
        assert ScrapeRequest(url="https://Example.com").url == "https://Example.com"

    @pytest.mark.parametrize("url", [
        "",
        "not a url",
        "/jobs/1",
        "mailto:jobs@example.com",
        "https://",
        "http://💩.la/jobs/1",
    ])
    def test_invalid_urls(self, url):
        with pytest.raises(ValidationError):
            ScrapeRequest(url=url)


class TestScrapeResult:
    """Test the result type."""

    def test_failure_has_no_fields(self):
        result = ScrapeResult.failure("https://example.com", "Network error: boom")

        assert result.success is False
        assert result.error == "Network error: boom"
        assert result.missing_fields == list(JobField)

    def test_set_field_records_source(self):
        result = ScrapeResult(url="https://example.com")
        result.set_field(JobField.TITLE, "Engineer", "jsonld")

        assert result.job_title == "Engineer"
        assert result.sources == {"job_title": "jsonld"}
        assert result.has_fields(REQUIRED_FIELDS)

    def test_success_response_shape(self):
        result = ScrapeResult(url="https://example.com", success=True, job_title="Engineer")

        assert result.to_response() == {
            "success": True,
            "jobTitle": "Engineer",
            "companyName": None,
            "location": None,
            "description": None,
        }

    def test_failure_response_shape(self):
        result = ScrapeResult(url="https://example.com", company_name="Acme", error="Could not find job title")

        assert result.to_response() == {
            "success": False,
            "error": "Could not find job title",
            "jobTitle": None,
            "companyName": "Acme",
            "location": None,
            "description": None,
        }

    def test_duration_ignored_in_equality(self):
        first = ScrapeResult(url="https://example.com", job_title="Engineer", duration_seconds=0.1)
        second = ScrapeResult(url="https://example.com", job_title="Engineer", duration_seconds=2.5)
        assert first == second

    def test_str(self):
        result = ScrapeResult(url="https://example.com", success=True, job_title="Engineer")
        assert str(result).startswith("✓ https://example.com: Engineer")
