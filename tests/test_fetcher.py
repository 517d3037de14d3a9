"""
PageFetcher tests with httpx.MockTransport.

Run with: pytest tests/test_fetcher.py -v
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import httpx
import pytest

from scrapers.base import FetchError, PageFetcher, is_extractable_content_type


async def fetch(handler, url="https://example.com/job", **options):
    async with PageFetcher(transport=httpx.MockTransport(handler), retry_wait=0, **options) as fetcher:
        return await fetcher.fetch(url)


class TestPageFetcher:
    """Test fetch limits and error mapping."""

    @pytest.mark.asyncio
    async def test_sends_browser_headers(self):
        seen = {}

        def handler(request):
            seen.update(request.headers)
            return httpx.Response(200, text="<html></html>", headers={"content-type": "text/html"})

        await fetch(handler, user_agent="Mozilla/5.0 Test")

        assert seen["user-agent"] == "Mozilla/5.0 Test"
        assert "text/html" in seen["accept"]

    @pytest.mark.asyncio
    async def test_returns_content_and_charset(self):
        def handler(request):
            return httpx.Response(
                200,
                content="<html>café</html>".encode("latin-1"),
                headers={"content-type": "text/html; charset=ISO-8859-1"},
            )

        page = await fetch(handler)

        assert page.status_code == 200
        assert page.encoding.lower() == "iso-8859-1"
        assert page.truncated is False

    @pytest.mark.asyncio
    async def test_large_body_capped(self):
        body = b"<html><body>" + b"x" * 500_000 + b"</body></html>"

        def handler(request):
            return httpx.Response(200, content=body, headers={"content-type": "text/html"})

        page = await fetch(handler, max_bytes=100_000)

        assert len(page.content) == 100_000
        assert page.truncated is True

    @pytest.mark.asyncio
    async def test_retries_connection_errors(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) < 2:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, text="<html>ok</html>", headers={"content-type": "text/html"})

        page = await fetch(handler, max_retries=3)

        assert len(attempts) == 2
        assert b"ok" in page.content

    @pytest.mark.asyncio
    async def test_connection_error_after_retries(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(FetchError) as exc_info:
            await fetch(handler, max_retries=2)

        assert exc_info.value.kind == "network"
        assert len(attempts) == 2

    @pytest.mark.asyncio
    async def test_timeout(self):
        async def handler(request):
            await asyncio.sleep(5)
            return httpx.Response(200, text="<html></html>")

        with pytest.raises(FetchError) as exc_info:
            await fetch(handler, timeout=0.2)

        assert exc_info.value.kind == "timeout"

    @pytest.mark.asyncio
    async def test_redirect_limit(self):
        def handler(request):
            return httpx.Response(302, headers={"location": "https://example.com/job"})

        with pytest.raises(FetchError) as exc_info:
            await fetch(handler, max_redirects=2)

        assert exc_info.value.kind == "redirects"

    @pytest.mark.asyncio
    async def test_unsupported_content_type(self):
        def handler(request):
            return httpx.Response(200, json={"title": "Engineer"})

        with pytest.raises(FetchError) as exc_info:
            await fetch(handler)

        assert exc_info.value.kind == "content_type"

    @pytest.mark.asyncio
    async def test_empty_body(self):
        def handler(request):
            return httpx.Response(200, text="   ", headers={"content-type": "text/html"})

        with pytest.raises(FetchError) as exc_info:
            await fetch(handler)

        assert exc_info.value.kind == "empty"

    @pytest.mark.asyncio
    async def test_unencodable_hostname(self):
        def handler(request):
            return httpx.Response(200, text="<html></html>", headers={"content-type": "text/html"})

        with pytest.raises(FetchError) as exc_info:
            await fetch(handler, url="http://💩.la/jobs/1")

        assert exc_info.value.kind == "invalid_url"

    @pytest.mark.asyncio
    async def test_requires_context_manager(self):
        with pytest.raises(RuntimeError):
            await PageFetcher().fetch("https://example.com/job")


class TestContentType:
    """Test which content types are parsed."""

    @pytest.mark.parametrize("content_type", [
        "text/html",
        "text/html; charset=utf-8",
        "application/xhtml+xml",
        "",
    ])
    def test_extractable(self, content_type):
        assert is_extractable_content_type(content_type)

    @pytest.mark.parametrize("content_type", ["application/pdf", "application/json", "image/png"])
    def test_not_extractable(self, content_type):
        assert not is_extractable_content_type(content_type)
