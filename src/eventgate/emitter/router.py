"""Severity-filtered event router.

Events at or above the configured threshold get the static tags, are submitted
through the transport and are then handed to every registered observer.
Everything else is dropped without building an event.

The module keeps one process-wide router, installed by `configure()` and
reached through `instance()` or the module-level severity functions. An
`EventRouter` can also be constructed directly and passed around explicitly.
"""

import threading
from collections.abc import Callable, Mapping
from types import MappingProxyType

from eventgate.logging import get_logger

from .event import EventRecord
from .sentry import SentryClient, Transport, TransportError
from .severity import Severity, ThresholdParseError, is_at_least_as_severe_as

log = get_logger(__name__)

Observer = Callable[[EventRecord], None]


class ConfigurationError(RuntimeError):
    """Raised when the process-wide router is configured more than once."""

    pass


class NotConfiguredError(RuntimeError):
    """Raised when the process-wide router is used before configuration."""

    pass


class EventRouter:
    """Filters events by severity and forwards accepted ones.

    In lenient mode (the default) per-event problems never reach the caller:
    an unparseable threshold drops every event, transport failures are logged
    and a failing observer does not stop the observers after it. In strict
    mode the threshold is validated on construction and transport or observer
    failures propagate out of the emitting call.
    """

    def __init__(
        self,
        client: Transport | None,
        threshold: str,
        static_tags: Mapping[str, str] | None = None,
        strict: bool = False,
    ):
        """Initialize the router.

        Args:
            client: Transport handle; None disables submission entirely
            threshold: Severity name, e.g. "Error"
            static_tags: Tags attached to every accepted event
            strict: Raise on configuration and delivery problems instead of
                dropping them

        Raises:
            ThresholdParseError: In strict mode, if `threshold` is not a severity
        """
        self.client = client
        self.strict = strict
        self.threshold_name = threshold
        self.static_tags: Mapping[str, str] = MappingProxyType(dict(static_tags or {}))

        self.threshold: Severity | None
        try:
            self.threshold = Severity.from_name(threshold)
        except ThresholdParseError:
            if strict:
                raise
            log.warning(
                "Invalid severity threshold, all events will be dropped",
                threshold=threshold,
            )
            self.threshold = None

        self._observers: list[Observer] = []
        self._observers_lock = threading.Lock()

    def subscribe(self, observer: Observer) -> None:
        """Register a callback invoked with every accepted event."""
        with self._observers_lock:
            self._observers.append(observer)

    @property
    def observers(self) -> tuple[Observer, ...]:
        with self._observers_lock:
            return tuple(self._observers)

    def accepts(self, severity: Severity) -> bool:
        """Check whether an event of this severity would be forwarded."""
        if self.client is None or self.threshold is None:
            return False
        return is_at_least_as_severe_as(severity, self.threshold)

    def fatal(self, message: str, exc: BaseException | None = None) -> EventRecord | None:
        return self.emit(message, Severity.FATAL, exc)

    def error(self, message: str, exc: BaseException | None = None) -> EventRecord | None:
        return self.emit(message, Severity.ERROR, exc)

    def warn(self, message: str, exc: BaseException | None = None) -> EventRecord | None:
        return self.emit(message, Severity.WARNING, exc)

    def info(self, message: str, exc: BaseException | None = None) -> EventRecord | None:
        return self.emit(message, Severity.INFO, exc)

    def debug(self, message: str, exc: BaseException | None = None) -> EventRecord | None:
        return self.emit(message, Severity.DEBUG, exc)

    def emit(
        self,
        message: str,
        severity: Severity,
        exc: BaseException | None = None,
    ) -> EventRecord | None:
        """Build, submit and publish an event if it meets the threshold.

        Returns:
            The submitted event, or None if it was dropped
        """
        if not self.accepts(severity):
            return None

        if exc is not None:
            event = EventRecord.from_exception(exc, severity)
        else:
            event = EventRecord.from_message(message, severity)
        event.message = message
        event.severity = severity
        event.tags = dict(self.static_tags)

        try:
            self.client.capture(event)  # type: ignore[union-attr]
        except TransportError as e:
            if self.strict:
                raise
            log.debug("Event submission failed", event_id=event.event_id, error=str(e))
        except Exception:
            if self.strict:
                raise
            log.exception("Transport failed unexpectedly", event_id=event.event_id)

        for observer in self.observers:
            try:
                observer(event)
            except Exception:
                if self.strict:
                    raise
                log.exception("Event observer failed", observer=repr(observer))

        return event


# Process-wide router installed by configure()
_instance: EventRouter | None = None
_configure_lock = threading.Lock()


def configure(
    dsn: str | None,
    threshold: str,
    static_tags: Mapping[str, str] | None = None,
    *,
    strict: bool = False,
    client: Transport | None = None,
) -> EventRouter:
    """Install the process-wide router.

    Args:
        dsn: Collector DSN; empty or None disables submission
        threshold: Severity name; events less severe than this are dropped
        static_tags: Tags attached to every accepted event
        strict: See EventRouter
        client: Transport to use instead of building a SentryClient from `dsn`

    Raises:
        ConfigurationError: If the router is already configured
        InvalidDSNError: If `dsn` cannot be parsed
        ThresholdParseError: In strict mode, if `threshold` is not a severity
    """
    global _instance

    with _configure_lock:
        if _instance is not None:
            raise ConfigurationError("eventgate is already configured")

        if client is None and dsn:
            client = SentryClient(dsn)
        if client is None:
            log.info("No collector DSN configured, event submission disabled")

        _instance = EventRouter(client, threshold, static_tags, strict=strict)
        log.debug(
            "Event router configured",
            threshold=threshold,
            tags=sorted(_instance.static_tags),
            strict=strict,
        )
        return _instance


def instance() -> EventRouter:
    """Return the process-wide router.

    Raises:
        NotConfiguredError: If configure() has not been called
    """
    if _instance is None:
        raise NotConfiguredError("eventgate must be configured before it can be used")
    return _instance


def subscribe(observer: Observer) -> None:
    instance().subscribe(observer)


def fatal(message: str, exc: BaseException | None = None) -> EventRecord | None:
    return instance().fatal(message, exc)


def error(message: str, exc: BaseException | None = None) -> EventRecord | None:
    return instance().error(message, exc)


def warn(message: str, exc: BaseException | None = None) -> EventRecord | None:
    return instance().warn(message, exc)


def info(message: str, exc: BaseException | None = None) -> EventRecord | None:
    return instance().info(message, exc)


def debug(message: str, exc: BaseException | None = None) -> EventRecord | None:
    return instance().debug(message, exc)
