"""
Scrape result model returned by the job posting extractor.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class JobField(str, Enum):
    """Content fields the extractor looks for, in extraction order."""

    TITLE = "job_title"
    COMPANY = "company_name"
    LOCATION = "location"
    DESCRIPTION = "description"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


# Fields that must be recovered for a scrape to count as successful.
REQUIRED_FIELDS: tuple[JobField, ...] = (JobField.TITLE,)


@dataclass
class ScrapeResult:
    """
    Outcome of one extraction.

    Absent fields mean "not found". A failed result still carries whatever
    fields were recovered so the user can complete them by hand.
    """

    url: str
    success: bool = False
    job_title: Optional[str] = None
    company_name: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    error: Optional[str] = None
    final_url: Optional[str] = None
    sources: dict[str, str] = field(default_factory=dict)
    duration_seconds: float = field(default=0.0, compare=False)

    @classmethod
    def failure(cls, url: str, error: str, final_url: Optional[str] = None) -> "ScrapeResult":
        """Create a failed result with no content fields."""
        return cls(url=url, success=False, error=error, final_url=final_url)

    def get(self, job_field: JobField) -> Optional[str]:
        return getattr(self, job_field.value)

    def set_field(self, job_field: JobField, value: str, source: str) -> None:
        setattr(self, job_field.value, value)
        self.sources[job_field.value] = source

    @property
    def missing_fields(self) -> list[JobField]:
        return [job_field for job_field in JobField if not self.get(job_field)]

    def has_fields(self, required: tuple[JobField, ...]) -> bool:
        return all(self.get(job_field) for job_field in required)

    def to_response(self) -> dict:
        """Convert to the JSON payload returned by POST /scrape-job."""
        payload = {"success": self.success}
        if not self.success:
            payload["error"] = self.error
        payload.update({
            "jobTitle": self.job_title,
            "companyName": self.company_name,
            "location": self.location,
            "description": self.description,
        })
        return payload

    def __str__(self) -> str:
        status = "✓" if self.success else "✗"
        found = len(JobField) - len(self.missing_fields)
        detail = self.job_title or self.error or "no title"
        return f"{status} {self.url}: {detail} ({found}/{len(JobField)} fields, {self.duration_seconds:.1f}s)"
