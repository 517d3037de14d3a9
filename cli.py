from __future__ import annotations

import asyncio
import json
from pathlib import Path

import click
from pydantic import ValidationError

from config.log_setup import configure_logging
from models.scrape_request import ScrapeRequest
from scrapers.job_posting import JobPostingExtractor


@click.group()
@click.option("--log-level", type=str, default=None, help="Override LOG_LEVEL.")
@click.option(
    "--log-format",
    type=click.Choice(["json", "console"]),
    default="console",
    show_default=True,
)
def cli(log_level: str | None, log_format: str) -> None:
    """Job posting extractor CLI."""
    configure_logging(level=log_level, fmt=log_format)


@cli.command()
@click.argument("url")
@click.option(
    "--html-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Parse a saved page instead of fetching URL.",
)
@click.option("--compact", is_flag=True, help="Print JSON on one line.")
def scrape(url: str, html_file: Path | None, compact: bool) -> None:
    """Extract a job posting and print it as JSON."""
    try:
        request = ScrapeRequest(url=url)
    except ValidationError:
        raise click.BadParameter("Invalid URL format", param_hint="URL")

    extractor = JobPostingExtractor()
    if html_file:
        result = extractor.extract_from_html(html_file.read_bytes(), request.url)
    else:
        result = asyncio.run(extractor.extract(request.url))

    click.echo(json.dumps(result.to_response(), indent=None if compact else 2, ensure_ascii=False))
    if not result.success:
        raise SystemExit(1)


@cli.command()
@click.option("--host", type=str, default="127.0.0.1", show_default=True)
@click.option("--port", type=int, default=8000, show_default=True)
@click.option("--reload", is_flag=True, help="Restart on code changes.")
def serve(host: str, port: int, reload: bool) -> None:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("api.app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    cli()
