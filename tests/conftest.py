"""Shared fixtures for eventgate tests."""

import logging

import pytest
import structlog

from eventgate.emitter import EventRecord, TransportError
from eventgate.emitter import router as router_module


class RecordingClient:
    """Transport double that records captured events."""

    def __init__(self, dsn: str | None = None, fail: bool = False):
        self.dsn = dsn
        self.fail = fail
        self.captured: list[EventRecord] = []

    def capture(self, event: EventRecord) -> None:
        self.captured.append(event)
        if self.fail:
            raise TransportError("collector unreachable")


@pytest.fixture(autouse=True)
def unconfigured(monkeypatch: pytest.MonkeyPatch) -> None:
    """Every test starts without a process-wide router."""
    monkeypatch.setattr(router_module, "_instance", None)


@pytest.fixture
def client() -> RecordingClient:
    return RecordingClient()


@pytest.fixture
def sentry_clients(monkeypatch: pytest.MonkeyPatch) -> list[RecordingClient]:
    """Replace SentryClient construction in configure() with recording clients."""
    created: list[RecordingClient] = []

    def factory(dsn: str) -> RecordingClient:
        c = RecordingClient(dsn)
        created.append(c)
        return c

    monkeypatch.setattr(router_module, "SentryClient", factory)
    return created


@pytest.fixture
def restore_logging():
    """Undo configure_logging() changes to stdlib and structlog state."""
    root = logging.getLogger()
    level = root.level
    httpx_level = logging.getLogger("httpx").level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(level)
    logging.getLogger("httpx").setLevel(httpx_level)
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()
