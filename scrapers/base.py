"""
HTTP fetching for job posting pages, with retry, redirect and size limits.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from config.settings import settings

logger = structlog.get_logger()

# Connection-level failures worth another attempt.
RETRYABLE_ERRORS = (
    httpx.ConnectError,
    httpx.ConnectTimeout,
    httpx.ReadError,
    httpx.RemoteProtocolError,
)

# Statuses job boards return when they refuse automated clients.
BLOCKED_STATUSES = {401, 403, 429, 999}

HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


class FetchError(Exception):
    """
    A page could not be fetched or is not something we can extract from.

    `kind` names the failure class: timeout, invalid_url, redirects,
    http_status, network, content_type or empty.
    """

    def __init__(self, kind: str, message: str):
        super().__init__(message)
        self.kind = kind


@dataclass
class FetchedPage:
    """Raw page content returned by PageFetcher."""

    url: str
    status_code: int
    content_type: str
    content: bytes
    encoding: Optional[str] = None
    truncated: bool = False


def _log_retry(retry_state) -> None:
    logger.warning(
        "Retrying request",
        attempt=retry_state.attempt_number,
        error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
    )


def is_extractable_content_type(content_type: str) -> bool:
    """HTML and XML are parsed; a missing header is given the benefit of the doubt."""
    media_type = content_type.split(";", 1)[0].strip().lower()
    return not media_type or "html" in media_type or "xml" in media_type


class PageFetcher:
    """
    Fetches a single page with a browser-like client.
    Use as an async context manager; each instance owns its HTTP client.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        max_redirects: Optional[int] = None,
        max_bytes: Optional[int] = None,
        max_retries: Optional[int] = None,
        retry_wait: Optional[float] = None,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout if timeout is not None else settings.scrape_timeout_seconds
        self.max_redirects = max_redirects if max_redirects is not None else settings.scrape_max_redirects
        self.max_bytes = max_bytes if max_bytes is not None else settings.scrape_max_response_bytes
        self.max_retries = max(1, max_retries if max_retries is not None else settings.scrape_max_retries)
        self.retry_wait = retry_wait if retry_wait is not None else settings.scrape_retry_wait_seconds
        self.user_agent = user_agent or settings.scrape_user_agent
        self.transport = transport
        self.client: Optional[httpx.AsyncClient] = None
        self.logger = structlog.get_logger().bind(component="fetcher")

    async def __aenter__(self):
        """Create async HTTP client on context entry."""
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers={
                "User-Agent": self.user_agent,
                "Accept": HTML_ACCEPT,
                "Accept-Language": settings.scrape_accept_language,
            },
            follow_redirects=True,
            max_redirects=self.max_redirects,
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Close HTTP client on context exit."""
        if self.client:
            await self.client.aclose()

    async def fetch(self, url: str) -> FetchedPage:
        """
        Fetch a page, bounded in time, redirects and size.

        Args:
            url: Absolute http(s) URL.

        Returns:
            FetchedPage with the (possibly truncated) body.

        Raises:
            FetchError: For every expected failure class.
        """
        if not self.client:
            raise RuntimeError("PageFetcher must be used as async context manager")

        self.logger.debug("Fetching HTML", url=url)

        try:
            return await asyncio.wait_for(self._fetch_with_retry(url), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            raise FetchError("timeout", f"Timed out after {self.timeout:g}s fetching the page")
        except httpx.InvalidURL as e:
            raise FetchError("invalid_url", f"Invalid URL: {e}")
        except httpx.TooManyRedirects:
            raise FetchError(
                "redirects",
                f"Too many redirects while fetching the page (limit {self.max_redirects})",
            )
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            message = f"HTTP {status}"
            if e.response.reason_phrase:
                message += f": {e.response.reason_phrase}"
            if status in BLOCKED_STATUSES:
                message += ". The site may be blocking automated access or require sign-in."
            raise FetchError("http_status", message)
        except httpx.RequestError as e:
            raise FetchError("network", f"Network error: {str(e) or type(e).__name__}")

    async def _fetch_with_retry(self, url: str) -> FetchedPage:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.retry_wait, max=self.retry_wait * 4),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            before_sleep=_log_retry,
            reraise=True,
        )
        page = None
        async for attempt in retrying:
            with attempt:
                page = await self._get(url)
        return page

    async def _get(self, url: str) -> FetchedPage:
        async with self.client.stream("GET", url) as response:
            response.raise_for_status()

            content_type = response.headers.get("content-type", "")
            if not is_extractable_content_type(content_type):
                raise FetchError(
                    "content_type",
                    f"Unsupported content type '{content_type}'. Only HTML job postings can be extracted.",
                )

            chunks = []
            size = 0
            truncated = False
            async for chunk in response.aiter_bytes():
                chunks.append(chunk)
                size += len(chunk)
                if size > self.max_bytes:
                    truncated = True
                    break

            content = b"".join(chunks)[: self.max_bytes]
            final_url = str(response.url)

        if truncated:
            self.logger.warning("Response truncated", url=final_url, max_bytes=self.max_bytes)

        if not content.strip():
            raise FetchError("empty", "The page returned an empty response")
        if content.lstrip().startswith(b"%PDF"):
            raise FetchError(
                "content_type",
                "The page is a PDF document. Only HTML job postings can be extracted.",
            )

        return FetchedPage(
            url=final_url,
            status_code=response.status_code,
            content_type=content_type,
            content=content,
            encoding=response.charset_encoding,
            truncated=truncated,
        )
