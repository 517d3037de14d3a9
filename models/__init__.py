"""
Data models for the Job Posting Extractor.
"""

from models.scrape_request import ScrapeRequest
from models.scrape_result import JobField, REQUIRED_FIELDS, ScrapeResult

__all__ = ["JobField", "REQUIRED_FIELDS", "ScrapeRequest", "ScrapeResult"]
