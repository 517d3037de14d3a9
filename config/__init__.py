"""
Configuration module for the Job Posting Extractor.
"""

from config.settings import settings, Settings, PROJECT_ROOT, CONFIG_DIR
from config.log_setup import configure_logging

__all__ = ["settings", "Settings", "PROJECT_ROOT", "CONFIG_DIR", "configure_logging"]
