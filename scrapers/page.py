"""
Parsed job posting page.

Wraps a BeautifulSoup document with the pieces extraction strategies need:
the host (for site-specific selectors), meta tags, the <title>, and any
Schema.org JobPosting objects embedded as JSON-LD.
"""

import json
from typing import Any, Iterator, Optional, Union

import httpx
import structlog
from bs4 import BeautifulSoup

logger = structlog.get_logger()

# JSON-LD blocks nested deeper than this are skipped.
MAX_JSONLD_DEPTH = 32

# Elements whose text is never part of the visible posting.
NON_CONTENT_TAGS = ["script", "style", "noscript", "template", "svg", "iframe"]


class JobPage:
    """A fetched page, parsed and ready for field extraction."""

    def __init__(self, url: str, soup: BeautifulSoup, structured_data: Optional[list] = None):
        self.url = url
        self.soup = soup
        self.structured_data = structured_data or []
        self.job_postings = [
            item for item in _flatten_jsonld(self.structured_data) if _is_job_posting(item)
        ]

    @classmethod
    def parse(cls, content: Union[bytes, str], url: str, encoding: Optional[str] = None) -> "JobPage":
        """
        Parse markup into a JobPage.

        JSON-LD blocks are collected before scripts are stripped.

        Raises:
            bs4.ParserRejectedMarkup: If the parser cannot handle the markup.
        """
        if isinstance(content, bytes):
            soup = BeautifulSoup(content, "lxml", from_encoding=encoding)
        else:
            soup = BeautifulSoup(content, "lxml")

        structured_data = []
        for script in soup.find_all("script", type="application/ld+json"):
            raw = script.string or script.get_text()
            if not raw or not raw.strip():
                continue
            try:
                data = json.loads(raw, strict=False)
            except (ValueError, RecursionError) as e:
                logger.debug("Failed to parse JSON-LD", url=url, error=str(e) or type(e).__name__)
                continue
            if _exceeds_depth(data, MAX_JSONLD_DEPTH):
                logger.debug("Skipping deeply nested JSON-LD", url=url, max_depth=MAX_JSONLD_DEPTH)
                continue
            structured_data.append(data)

        for tag in soup(NON_CONTENT_TAGS):
            tag.decompose()

        return cls(url, soup, structured_data)

    @property
    def host(self) -> str:
        try:
            return (httpx.URL(self.url).host or "").lower()
        except httpx.InvalidURL:
            return ""

    @property
    def title_text(self) -> Optional[str]:
        if self.soup.title is None:
            return None
        return self.soup.title.get_text() or None

    def meta_content(self, *keys: str) -> Iterator[str]:
        """Yield content of <meta property=...> or <meta name=...> tags, in key order."""
        for key in keys:
            for attr in ("property", "name"):
                tag = self.soup.find("meta", attrs={attr: key})
                if tag and tag.get("content"):
                    yield tag["content"]


def _flatten_jsonld(data: Any) -> Iterator[dict]:
    """Walk JSON-LD payloads, yielding every object that could be a posting."""
    if isinstance(data, list):
        for item in data:
            yield from _flatten_jsonld(item)
    elif isinstance(data, dict):
        yield data
        graph = data.get("@graph")
        if isinstance(graph, list):
            yield from _flatten_jsonld(graph)
        elements = data.get("itemListElement")
        if isinstance(elements, list):
            for element in elements:
                if isinstance(element, dict) and isinstance(element.get("item"), dict):
                    yield element["item"]


def _is_job_posting(item: dict) -> bool:
    """Check if JSON-LD item is a JobPosting."""
    item_type = item.get("@type", "")
    if isinstance(item_type, str):
        return "JobPosting" in item_type
    if isinstance(item_type, list):
        return any("JobPosting" in str(t) for t in item_type)
    return False


def _exceeds_depth(data: Any, max_depth: int) -> bool:
    """Check JSON nesting depth without recursion."""
    stack = [(data, 1)]
    while stack:
        value, depth = stack.pop()
        if depth > max_depth:
            return True
        if isinstance(value, dict):
            stack.extend((child, depth + 1) for child in value.values())
        elif isinstance(value, list):
            stack.extend((child, depth + 1) for child in value)
    return False
