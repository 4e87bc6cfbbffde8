"""Configuration settings for gitcrawl.

This module provides a Settings class giving property-based access to
configuration values, with GITCRAWL_* environment variables as fallback.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from gitcrawl.config.defaults import get_default_config
from gitcrawl.config.schema import ConfigValidationError, deep_merge, validate_config


class Settings:
    """Application settings.

    Values come from an explicit config mapping when one is given, then from
    the environment, then from the defaults.
    """

    ENV_PREFIX = "GITCRAWL_"

    def __init__(self, config: dict[str, Any] | None = None):
        self._config = validate_config(config) if config is not None else None

    @classmethod
    def from_file(cls, path: str | Path) -> Settings:
        """Load a JSON config file merged over the defaults."""
        config_path = Path(path)
        try:
            loaded = json.loads(config_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigValidationError(
                [f"Invalid JSON in {config_path}: {e.msg} (line {e.lineno})"]
            ) from e
        if not isinstance(loaded, dict):
            raise ConfigValidationError([f"Expected object at top of {config_path}"])
        return cls(deep_merge(get_default_config(), loaded))

    def _get(self, key: str, default: Any) -> Any:
        """Get config value from explicit config, fallback to env, then default."""
        if self._config is not None:
            return self._config.get(key, default)
        env_val = os.getenv(self.ENV_PREFIX + key.upper())
        if env_val:
            # Type conversion based on default type
            if isinstance(default, bool):
                return env_val.lower() in ("true", "1", "yes", "on")
            elif isinstance(default, int):
                return int(env_val)
            return env_val
        return default

    def get_all(self) -> dict[str, Any]:
        """Return the effective configuration, validated."""
        defaults = get_default_config()
        return validate_config({key: self._get(key, defaults[key]) for key in defaults})

    @property
    def history_count(self) -> int:
        return self._get("history_count", get_default_config()["history_count"])

    # Logging Configuration
    @property
    def log_level(self) -> str:
        return str(self._get("log_level", "INFO")).upper()

    @property
    def log_format(self) -> str:
        return str(self._get("log_format", "pretty")).lower()

    @property
    def log_colors(self) -> bool:
        return bool(self._get("log_colors", True))


settings = Settings()
