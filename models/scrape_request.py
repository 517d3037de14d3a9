"""
Validation of incoming scrape requests.
"""

import httpx
from pydantic import AnyHttpUrl, BaseModel, TypeAdapter, field_validator

_http_url = TypeAdapter(AnyHttpUrl)


class ScrapeRequest(BaseModel):
    """A request to extract a job posting from `url`."""

    url: str

    @field_validator("url", mode="before")
    @classmethod
    def validate_url(cls, value):
        if not isinstance(value, str):
            raise ValueError("url must be a string")
        value = value.strip()
        # AnyHttpUrl rejects relative URLs and non-http(s) schemes. The
        # unnormalized string is returned so the fetch uses it as sent.
        _http_url.validate_python(value)
        # httpx encodes hostnames more strictly than pydantic (IDNA 2008).
        try:
            httpx.URL(value)
        except httpx.InvalidURL as e:
            raise ValueError(str(e))
        return value
