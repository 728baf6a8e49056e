"""Severity-filtered event emitter.

Forwards leveled events to a Sentry-compatible collector and local observers.
"""

from .event import EventRecord, ExceptionDetail, StackFrame
from .host_id import UNDEFINED_SETTING, host_id_from_settings, host_tags
from .router import (
    ConfigurationError,
    EventRouter,
    NotConfiguredError,
    configure,
    debug,
    error,
    fatal,
    info,
    instance,
    subscribe,
    warn,
)
from .sentry import Dsn, InvalidDSNError, SentryClient, Transport, TransportError
from .severity import Severity, ThresholdParseError, is_at_least_as_severe_as

__all__ = [
    # Router
    "EventRouter",
    "configure",
    "instance",
    "subscribe",
    "fatal",
    "error",
    "warn",
    "info",
    "debug",
    "ConfigurationError",
    "NotConfiguredError",
    # Events
    "EventRecord",
    "ExceptionDetail",
    "StackFrame",
    # Severity
    "Severity",
    "ThresholdParseError",
    "is_at_least_as_severe_as",
    # Transport
    "SentryClient",
    "Transport",
    "Dsn",
    "InvalidDSNError",
    "TransportError",
    # Host id
    "host_id_from_settings",
    "host_tags",
    "UNDEFINED_SETTING",
]
