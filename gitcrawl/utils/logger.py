"""Structured logging for gitcrawl using structlog."""

from __future__ import annotations

import logging

import structlog
from structlog.types import FilteringBoundLogger

from gitcrawl.config.settings import Settings, settings


def _level(config: Settings) -> int:
    return getattr(logging, config.log_level, logging.INFO)


# Configure structlog based on settings (GITCRAWL_LOG_* env vars by default)
def configure_structlog(config: Settings | None = None):
    """Configure structlog with pretty or JSON output based on log_format.

    Stdlib logging is routed through structlog so dulwich and asyncio records
    are rendered the same way as ours and stay controllable by level.
    """
    config = config or settings

    # Choose renderer for final output
    if config.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=config.log_colors)

    # Root logger + handler with ProcessorFormatter
    logging.root.handlers = []
    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=[
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
            ],
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(_level(config))

    logging.captureWarnings(True)

    # dulwich is chatty about pack and ref handling at INFO
    logging.getLogger("dulwich").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    # structlog pipeline; wrap_for_formatter hands off to ProcessorFormatter above
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Configure structlog on module import
configure_structlog()


def fetch_log(
    logger: FilteringBoundLogger, fetcher: str, event: str, **kwargs
) -> None:
    """Log a fetcher lifecycle event."""
    logger.debug(f"{fetcher}: {event}", fetcher=fetcher, event_type=event, **kwargs)


def get_logger(name: str, level: int | None = None) -> FilteringBoundLogger:
    """Get a configured structlog logger.

    Without an explicit level the logger inherits the root level.
    """
    if level is not None:
        logging.getLogger(name).setLevel(level)
    return structlog.get_logger(name)


# Shared by the store modules
store_logger = get_logger("gitcrawl.store")
