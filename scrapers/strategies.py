"""
Field extraction strategies.

Each strategy proposes candidate values for one or more JobFields. The
StrategyChain asks strategies in priority order, field by field, and keeps
the first candidate that survives cleaning and plausibility checks:

1. JSON-LD JobPosting data
2. Site-specific selectors (LinkedIn, Indeed, Glassdoor, Greenhouse, Lever)
3. Generic selectors (h1, company/location/description classes)
4. Open Graph and meta description tags
5. The document <title>
6. Largest text block (description only)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional

import structlog
from bs4 import Tag

from config.settings import settings
from models.scrape_result import JobField
from scrapers.page import JobPage
from utils.config import load_site_selectors
from utils.text_cleaning import (
    clean_company_name,
    normalize_multiline,
    normalize_whitespace,
    primary_title_segment,
    split_role_and_company,
    strip_html,
    truncate,
)

logger = structlog.get_logger()

MAX_FIELD_LENGTHS = {
    JobField.TITLE: 200,
    JobField.COMPANY: 120,
    JobField.LOCATION: 150,
}

# Headings that show up on login walls, listing pages and error pages.
GENERIC_PAGE_LABELS = {
    "404",
    "access denied",
    "apply",
    "apply now",
    "careers",
    "home",
    "job search",
    "jobs",
    "join linkedin",
    "log in",
    "login",
    "page not found",
    "sign in",
    "sign up",
}


@dataclass
class FieldMatch:
    """A cleaned value and the strategy that produced it."""

    value: str
    strategy: str


def element_text(element: Tag, job_field: JobField) -> str:
    separator = "\n" if job_field is JobField.DESCRIPTION else " "
    return element.get_text(separator=separator)


class ExtractionStrategy(ABC):
    """Proposes candidate values for a field from a parsed page."""

    name: str = "unknown"
    fields: frozenset = frozenset(JobField)

    def supports(self, job_field: JobField) -> bool:
        return job_field in self.fields

    @abstractmethod
    def candidates(self, job_field: JobField, page: JobPage) -> Iterator[str]:
        """
        Yield raw candidate values for a field, best first.

        Candidates may contain markup and untidy whitespace; the chain
        cleans them.
        """
        pass


class JsonLdStrategy(ExtractionStrategy):
    """Reads Schema.org JobPosting objects embedded as JSON-LD."""

    name = "jsonld"

    def candidates(self, job_field: JobField, page: JobPage) -> Iterator[str]:
        for posting in page.job_postings:
            if job_field is JobField.TITLE:
                yield from _scalars(posting.get("title"), posting.get("name"))
            elif job_field is JobField.COMPANY:
                yield from _organization_names(posting.get("hiringOrganization"))
            elif job_field is JobField.LOCATION:
                yield from _locations(posting.get("jobLocation"))
                if "TELECOMMUTE" in str(posting.get("jobLocationType", "")).upper():
                    yield "Remote"
            elif job_field is JobField.DESCRIPTION:
                yield from _scalars(posting.get("description"))


class SiteSelectorStrategy(ExtractionStrategy):
    """
    CSS selectors for one job board, used only on that board's domains.

    Selector entries are either a CSS string or {"css": ..., "attr": ...}
    to read an attribute instead of the element text.
    """

    def __init__(self, site: str, domains: Iterable[str], selectors: dict[JobField, list]):
        self.site = site
        self.domains = [domain.lower().lstrip(".") for domain in domains]
        self.selectors = selectors
        self.name = f"site:{site}"
        self.fields = frozenset(selectors)

    @classmethod
    def from_config(cls, site: str, config: dict[str, Any]) -> "SiteSelectorStrategy":
        selectors = {}
        for job_field in JobField:
            entries = config.get(job_field.value)
            if entries:
                selectors[job_field] = list(entries)
        return cls(site, config.get("domains", []), selectors)

    def matches(self, host: str) -> bool:
        return any(host == domain or host.endswith("." + domain) for domain in self.domains)

    def candidates(self, job_field: JobField, page: JobPage) -> Iterator[str]:
        if not self.matches(page.host):
            return
        for entry in self.selectors.get(job_field, []):
            if isinstance(entry, dict):
                css, attr = entry["css"], entry.get("attr")
            else:
                css, attr = entry, None
            for element in page.soup.select(css):
                if attr:
                    value = element.get(attr)
                    if isinstance(value, str):
                        yield value
                else:
                    yield element_text(element, job_field)


class GenericSelectorStrategy(ExtractionStrategy):
    """Selectors that work on many career pages without site knowledge."""

    name = "generic"
    # Only the first few matches per selector are worth looking at.
    max_matches = 5

    SELECTORS = {
        JobField.TITLE: [
            "h1",
            "[itemprop='title']",
            "[class*='job-title']",
            "[class*='jobTitle']",
        ],
        JobField.COMPANY: [
            "[itemprop='hiringOrganization'] [itemprop='name']",
            "[itemprop='hiringOrganization']",
            "[class*='company']",
            "[class*='employer']",
            "[class*='organization']",
        ],
        JobField.LOCATION: [
            "[itemprop='jobLocation']",
            "[class*='location']",
            "[class*='city']",
        ],
        JobField.DESCRIPTION: [
            "[itemprop='description']",
            "[class*='job-description']",
            "[class*='jobDescription']",
            "[class*='description']",
            "article",
            "main",
        ],
    }

    def candidates(self, job_field: JobField, page: JobPage) -> Iterator[str]:
        for css in self.SELECTORS[job_field]:
            for element in page.soup.select(css, limit=self.max_matches):
                yield element_text(element, job_field)


class MetaTagStrategy(ExtractionStrategy):
    """Open Graph, Twitter card and meta description tags."""

    name = "meta"
    fields = frozenset({JobField.TITLE, JobField.COMPANY, JobField.DESCRIPTION})

    def candidates(self, job_field: JobField, page: JobPage) -> Iterator[str]:
        if job_field is JobField.TITLE:
            for title in page.meta_content("og:title", "twitter:title"):
                yield from _roles_from_title(title)
        elif job_field is JobField.COMPANY:
            for title in page.meta_content("og:title", "twitter:title"):
                yield from _companies_from_title(title)
            yield from page.meta_content("og:site_name")
        elif job_field is JobField.DESCRIPTION:
            yield from page.meta_content("og:description", "description", "twitter:description")


class TitleTagStrategy(ExtractionStrategy):
    """The document <title>, e.g. 'Backend Developer at Acme - Careers'."""

    name = "title_tag"
    fields = frozenset({JobField.TITLE, JobField.COMPANY})

    def candidates(self, job_field: JobField, page: JobPage) -> Iterator[str]:
        title = page.title_text
        if not title:
            return
        if job_field is JobField.TITLE:
            yield from _roles_from_title(title)
        else:
            yield from _companies_from_title(title)


class LargestTextBlockStrategy(ExtractionStrategy):
    """Picks the container whose paragraphs and list items hold the most text."""

    name = "text_block"
    fields = frozenset({JobField.DESCRIPTION})

    def candidates(self, job_field: JobField, page: JobPage) -> Iterator[str]:
        scores: dict[int, list] = {}
        for element in page.soup.find_all(["p", "li"]):
            container = element.parent
            if element.name == "li" and container is not None:
                container = container.parent
            if container is None:
                continue
            length = len(element.get_text(" ", strip=True))
            entry = scores.setdefault(id(container), [container, 0])
            entry[1] += length

        if not scores:
            return
        best, score = max(scores.values(), key=lambda entry: entry[1])
        if score:
            yield element_text(best, job_field)


class StrategyChain:
    """
    Ordered strategies evaluated per field until one yields a plausible value.

    Fields are resolved independently; a strategy failing on one field does
    not affect the others.
    """

    def __init__(
        self,
        strategies: list[ExtractionStrategy],
        max_description_length: Optional[int] = None,
        min_description_length: Optional[int] = None,
    ):
        self.strategies = list(strategies)
        self.max_description_length = (
            max_description_length
            if max_description_length is not None
            else settings.scrape_max_description_length
        )
        self.min_description_length = (
            min_description_length
            if min_description_length is not None
            else settings.scrape_min_description_length
        )

    def resolve(self, job_field: JobField, page: JobPage) -> Optional[FieldMatch]:
        for strategy in self.strategies:
            if not strategy.supports(job_field):
                continue
            try:
                for raw in strategy.candidates(job_field, page):
                    value = self.clean(job_field, raw)
                    if self.is_plausible(job_field, value):
                        logger.debug(
                            "Field resolved",
                            url=page.url,
                            field=job_field.value,
                            strategy=strategy.name,
                        )
                        return FieldMatch(value=value, strategy=strategy.name)
            except (AttributeError, TypeError, ValueError, KeyError) as e:
                logger.warning(
                    "Strategy failed",
                    url=page.url,
                    field=job_field.value,
                    strategy=strategy.name,
                    error=str(e),
                )
                continue
        return None

    def clean(self, job_field: JobField, raw: Any) -> str:
        text = strip_html(str(raw))
        if job_field is JobField.DESCRIPTION:
            return truncate(normalize_multiline(text), self.max_description_length)
        if job_field is JobField.COMPANY:
            return clean_company_name(text)
        return normalize_whitespace(text)

    def is_plausible(self, job_field: JobField, value: str) -> bool:
        if not value:
            return False
        if job_field is JobField.DESCRIPTION:
            return len(value) >= self.min_description_length
        if len(value) > MAX_FIELD_LENGTHS[job_field]:
            return False
        if job_field in (JobField.TITLE, JobField.COMPANY):
            return value.lower().strip(" .!:") not in GENERIC_PAGE_LABELS
        return True


def load_site_strategies(path: Optional[Path] = None) -> list[SiteSelectorStrategy]:
    """Build one SiteSelectorStrategy per site in the selector YAML file."""
    sites = load_site_selectors(path or settings.site_selectors_path)
    return [SiteSelectorStrategy.from_config(site, config or {}) for site, config in sites.items()]


def default_strategies(selectors_path: Optional[Path] = None) -> list[ExtractionStrategy]:
    """The standard strategy order used by the extractor."""
    return [
        JsonLdStrategy(),
        *load_site_strategies(selectors_path),
        GenericSelectorStrategy(),
        MetaTagStrategy(),
        TitleTagStrategy(),
        LargestTextBlockStrategy(),
    ]


def _scalars(*values: Any) -> Iterator[str]:
    for value in values:
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            yield str(value)
        elif isinstance(value, list):
            yield from _scalars(*value)


def _organization_names(org: Any) -> Iterator[str]:
    if isinstance(org, str):
        yield org
    elif isinstance(org, dict):
        yield from _scalars(org.get("name"), org.get("legalName"))
    elif isinstance(org, list):
        for item in org:
            yield from _organization_names(item)


def _locations(location: Any) -> Iterator[str]:
    if isinstance(location, str):
        yield location
    elif isinstance(location, list):
        for item in location:
            yield from _locations(item)
    elif isinstance(location, dict):
        address = location.get("address")
        if isinstance(address, dict):
            formatted = _format_address(address)
            if formatted:
                yield formatted
        elif isinstance(address, str):
            yield address
        yield from _scalars(location.get("name"))


def _format_address(address: dict) -> str:
    country = address.get("addressCountry")
    if isinstance(country, dict):
        country = country.get("name")
    parts = []
    for part in (address.get("addressLocality"), address.get("addressRegion"), country):
        if isinstance(part, str) and part.strip() and part.strip().lower() not in {p.lower() for p in parts}:
            parts.append(part.strip())
    return ", ".join(parts)


def _roles_from_title(title: str) -> Iterator[str]:
    head = primary_title_segment(title)
    if head:
        role, _ = split_role_and_company(head)
        yield role


def _companies_from_title(title: str) -> Iterator[str]:
    head = primary_title_segment(title)
    if head:
        _, company = split_role_and_company(head)
        if company:
            yield company
