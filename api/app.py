"""
HTTP API for the job posting extractor.

POST /scrape-job answers 200 whenever the extractor returns a result, even a
failed one, so the client can prefill whatever was found.
"""

from functools import lru_cache

import structlog
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from config.log_setup import configure_logging
from config.settings import settings
from models.scrape_request import ScrapeRequest
from scrapers.job_posting import JobPostingExtractor

logger = structlog.get_logger()

router = APIRouter()


@lru_cache
def get_extractor() -> JobPostingExtractor:
    return JobPostingExtractor()


async def _read_json(request: Request):
    try:
        return await request.json()
    except ValueError:
        return None


@router.post("/scrape-job")
async def scrape_job(request: Request, extractor: JobPostingExtractor = Depends(get_extractor)):
    payload = await _read_json(request)
    url = payload.get("url") if isinstance(payload, dict) else None

    if not url:
        return JSONResponse({"error": "URL is required"}, status_code=400)

    try:
        scrape_request = ScrapeRequest(url=url)
    except ValidationError:
        return JSONResponse({"error": "Invalid URL format"}, status_code=400)

    try:
        result = await extractor.extract(scrape_request.url)
    except Exception as e:
        logger.exception("Unexpected scraping error", url=scrape_request.url)
        return JSONResponse({"error": str(e) or "Failed to scrape job"}, status_code=500)

    return JSONResponse(result.to_response())


@router.get("/health")
async def health():
    return {"status": "ok"}


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="Job Posting Extractor")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


app = create_app()
