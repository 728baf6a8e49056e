"""Structured logging for eventgate.

structlog renders JSON when stdout is not a terminal and pretty console output
otherwise. Stdlib logging (httpx included) goes through the same renderer.
Also provides an observer that writes every forwarded event to the log.
"""

import logging
import sys
from collections.abc import Callable
from typing import TYPE_CHECKING, cast

import structlog

if TYPE_CHECKING:
    from eventgate.emitter.event import EventRecord

# Stdlib level used when logging a forwarded event of each severity
_SEVERITY_LOG_LEVELS = {
    "fatal": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def configure_logging(service_name: str, level: str = "INFO", json: bool | None = None) -> None:
    """Configure structured logging for a service.

    Args:
        service_name: Bound as `service` on every entry (e.g. 'billing-api')
        level: Log level ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
        json: Force JSON (True) or console (False) output; default picks by TTY
    """
    log_level = getattr(logging, level.upper())
    if json is None:
        json = not sys.stdout.isatty()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processor=renderer,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root_logger = logging.getLogger()
    if root_logger.hasHandlers():
        root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))

    structlog.contextvars.bind_contextvars(service=service_name)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger instance, usually with __name__ of the calling module."""
    return cast(structlog.BoundLogger, structlog.get_logger(name))


def log_event_observer(
    logger: structlog.BoundLogger | None = None,
) -> Callable[["EventRecord"], None]:
    """Build an observer that logs each forwarded event.

    The log level follows the event severity. Subscribe the result on a router
    to keep a local trail of what was sent to the collector.
    """
    log = logger or get_logger("eventgate.events")

    def observe(event: "EventRecord") -> None:
        log.log(
            _SEVERITY_LOG_LEVELS[event.severity.level],
            "Event forwarded",
            event_id=event.event_id,
            severity=event.severity.level,
            message=event.message,
            tags=event.tags,
            exception_type=event.exception.type if event.exception else None,
        )

    return observe
