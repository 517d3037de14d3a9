"""
Application settings and configuration.
Uses pydantic-settings for environment variable loading.
"""

from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Fetching
    scrape_user_agent: str = Field(
        default="Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        description="User agent string for HTTP requests"
    )
    scrape_accept_language: str = Field(
        default="en-US,en;q=0.9",
        description="Accept-Language header sent with requests"
    )
    scrape_timeout_seconds: float = Field(
        default=10.0,
        description="Upper bound on the whole fetch, retries included"
    )
    scrape_max_retries: int = Field(
        default=2,
        description="Maximum attempts for transient connection failures"
    )
    scrape_retry_wait_seconds: float = Field(
        default=0.5,
        description="Base wait for exponential backoff between attempts"
    )
    scrape_max_redirects: int = Field(
        default=5,
        description="Maximum redirects followed before giving up"
    )
    scrape_max_response_bytes: int = Field(
        default=2_000_000,
        description="Bytes of markup read before the body is cut off"
    )

    # Extraction
    scrape_max_description_length: int = Field(
        default=5000,
        description="Descriptions longer than this are truncated"
    )
    scrape_min_description_length: int = Field(
        default=20,
        description="Shorter description candidates are ignored"
    )
    scrape_required_fields: list[str] = Field(
        default=["job_title"],
        description="Fields that must be found for a scrape to count as successful"
    )
    site_selectors_path: Path = Field(
        default=CONFIG_DIR / "site_selectors.yaml",
        description="YAML file with per-site CSS selectors"
    )

    # API
    api_cors_origins: list[str] = Field(default=["*"])

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")


# Global settings instance
settings = Settings()
