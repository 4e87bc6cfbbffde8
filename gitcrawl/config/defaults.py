"""Default configuration values for gitcrawl."""

from typing import Any


def get_default_config() -> dict[str, Any]:
    """Return the default configuration dictionary."""
    return {
        # History walking
        # Number of commits a walk collects when the caller does not ask for a count
        "history_count": 50,
        # Logging Configuration
        "log_level": "INFO",
        "log_format": "pretty",
        "log_colors": True,
    }
