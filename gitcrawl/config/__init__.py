"""Configuration module for gitcrawl."""

from .constants import COMMIT_SUMMARY_LEN, FETCH_ENTIRE_HISTORY
from .defaults import get_default_config
from .schema import ConfigValidationError, CrawlConfig, validate_config
from .settings import Settings, settings

__all__ = [
    "settings",
    "Settings",
    "COMMIT_SUMMARY_LEN",
    "FETCH_ENTIRE_HISTORY",
    "ConfigValidationError",
    "CrawlConfig",
    "get_default_config",
    "validate_config",
]
