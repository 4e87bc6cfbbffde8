from __future__ import annotations

from copy import deepcopy
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from gitcrawl.config.constants import FETCH_ENTIRE_HISTORY


def deep_merge(base: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge updates into base without mutating inputs.

    - Keys present in updates with non-None values are merged/overwritten
    - Keys present in updates with None values are skipped (preserve base value)
    - Keys not present in updates are preserved from base
    """
    result = deepcopy(base)
    for key, value in updates.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        elif key in result and value is None:
            # Treat None as "not provided" so lower layers keep their values
            continue
        else:
            result[key] = value
    return result


class CrawlConfig(BaseModel):
    history_count: int = 50
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["pretty", "json"] = "pretty"
    log_colors: bool = True

    model_config = ConfigDict(extra="ignore")

    @field_validator("log_level", "log_format", mode="before")
    @classmethod
    def normalize_case(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        return value.lower() if value.lower() in ("pretty", "json") else value.upper()

    @field_validator("history_count")
    @classmethod
    def check_history_count(cls, value: int) -> int:
        if value < 1 and value != FETCH_ENTIRE_HISTORY:
            raise ValueError(
                f"history_count must be a positive integer or {FETCH_ENTIRE_HISTORY} "
                f"for the entire history, got {value}"
            )
        return value


class ConfigValidationError(Exception):
    """Structured configuration validation error."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


def validate_config(config: dict[str, Any]) -> dict[str, Any]:
    """Validate configuration using Pydantic schema.

    Raises:
        ConfigValidationError: With structured list of human-readable error messages.
    """
    try:
        crawl_config = CrawlConfig.model_validate(config)
        return crawl_config.model_dump(mode="json")
    except ValidationError as e:
        errors = _extract_validation_errors(e)
        raise ConfigValidationError(errors) from e


def _extract_validation_errors(exc: ValidationError) -> list[str]:
    """Convert Pydantic ValidationError to list of human-readable messages."""
    errors = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err["loc"]) if err["loc"] else "config"
        msg = err["msg"]

        # Strip Pydantic's "Value error, " prefix from our custom messages
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, ") :]

        if err["type"] == "value_error":
            errors.append(msg)
        elif err["type"] in ("int_type", "int_parsing"):
            errors.append(f"Expected integer at '{loc}'")
        elif err["type"] in ("bool_type", "bool_parsing"):
            errors.append(f"Expected boolean at '{loc}'")
        elif err["type"] == "literal_error":
            errors.append(f"Unsupported value at '{loc}': {msg}")
        else:
            errors.append(f"{loc}: {msg}")

    return errors if errors else ["Invalid configuration"]
