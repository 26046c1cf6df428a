"""
Structured logging for resilience-config.

Manifesto:
    Configuration is resolved once at startup, so the log lines emitted
    while it happens are the only trace of *why* an instance ended up
    with the values it runs with.  Every line is a structlog event with
    the primitive kind and instance name as fields, rendered as JSON for
    aggregation or as coloured console output while developing.

    Output goes to stderr so command output on stdout (``resilience-config
    resolve --format json``) stays machine readable.

Examples:
    >>> from resilience_config.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", service="orders-api")
    >>> logger = get_logger(__name__)
    >>> logger.debug("config_resolved", kind="bulkhead", instance="backendA")

Tags:
    logging, structlog, observability, resilience

Doc-Types:
    api-reference
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

_service: dict[str, str] = {"name": "resilience-config"}


def _add_service(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", _service["name"])
    return event_dict


def _drop_none(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Anonymous records resolve with ``instance=None``; leave the key out."""
    return {key: value for key, value in event_dict.items() if value is not None}


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "resilience-config",
    add_timestamp: bool = True,
) -> None:
    """Configure structlog for the process.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR)
        json_format: JSON lines when True, console when False, auto-detect on None
        service: Value of the ``service`` field on every event
        add_timestamp: Prefix events with an ISO-8601 UTC ``timestamp``
    """
    _service["name"] = service
    threshold = logging.getLevelName(level.upper())
    if not isinstance(threshold, int):
        threshold = logging.INFO
    if json_format is None:
        json_format = not sys.stderr.isatty()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        _add_service,
        _drop_none,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]
    if add_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso", utc=True))
    processors.append(
        structlog.processors.JSONRenderer() if json_format else structlog.dev.ConsoleRenderer(colors=True)
    )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
    # stdlib loggers (uvicorn, fastapi) share the level and stream
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=threshold)


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger (usually ``get_logger(__name__)``)."""
    return structlog.get_logger(name)


class LogContext:
    """Bind context fields for the duration of a ``with`` block.

    Nested blocks restore the outer values on exit.

    Example:
        with LogContext(kind="retry"):
            logger.info("primitive_registered", instance="backendA")
    """

    def __init__(self, **values: Any):
        self._values = values
        self._tokens: dict[str, Any] = {}

    def __enter__(self) -> LogContext:
        self._tokens = dict(structlog.contextvars.bind_contextvars(**self._values))
        return self

    def __exit__(self, *exc_info: Any) -> None:
        structlog.contextvars.reset_contextvars(**self._tokens)


__all__ = [
    "configure_logging",
    "get_logger",
    "LogContext",
]
