"""
Structured logging configuration using structlog.

Scheduler runs and API requests share one pipeline. Values bound with
bind_run_context (run_id, request_id) are merged into every event of the
current task, so all lines of one compliance cycle can be grepped by
run_id. Output is colored console in development and JSON elsewhere, or
whenever LOG_JSON is set.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from entityhub.config.settings import Settings, get_settings

# Third-party loggers that only matter when something is wrong
QUIET_LOGGERS: dict[str, int] = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "uvicorn.access": logging.WARNING,
}


def add_service_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    settings = get_settings()
    event_dict.setdefault("service", "entityhub")
    event_dict["version"] = settings.app_version
    event_dict["environment"] = settings.environment
    return event_dict


def drop_none_values(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Drop unset optional fields such as error or traceback."""
    return {k: v for k, v in event_dict.items() if v is not None}


def _renderer(settings: Settings) -> list[Processor]:
    if settings.log_json or settings.environment != "development":
        return [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]


def configure_logging(level: str | None = None) -> None:
    """
    Configure structlog and stdlib logging.

    Args:
        level: Overrides LOG_LEVEL, e.g. "DEBUG" for a verbose CLI run.
    """
    settings = get_settings()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        add_service_context,
        drop_none_values,
        *_renderer(settings),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, (level or settings.log_level).upper()),
        force=True,
    )
    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


def bind_run_context(**values: Any) -> None:
    """Bind key/values to every log event of the current task (e.g. run_id)."""
    structlog.contextvars.bind_contextvars(**values)


def clear_run_context(*keys: str) -> None:
    """Unbind the given keys, or everything bound when called without any."""
    if keys:
        structlog.contextvars.unbind_contextvars(*keys)
    else:
        structlog.contextvars.clear_contextvars()


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
