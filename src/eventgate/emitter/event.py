"""Event records handed to the transport and to observers."""

import traceback
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .severity import Severity


@dataclass(frozen=True)
class StackFrame:
    """A single frame of an exception traceback."""

    filename: str
    function: str
    lineno: int | None
    context_line: str | None = None


@dataclass(frozen=True)
class ExceptionDetail:
    """Exception type, value and stack extracted from a raised exception."""

    type: str
    value: str
    module: str | None
    frames: list[StackFrame] = field(default_factory=list)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ExceptionDetail":
        exc_type = type(exc)
        frames = [
            StackFrame(
                filename=frame.filename,
                function=frame.name,
                lineno=frame.lineno,
                context_line=frame.line or None,
            )
            for frame in traceback.extract_tb(exc.__traceback__)
        ]
        return cls(
            type=exc_type.__name__,
            value=str(exc),
            module=exc_type.__module__,
            frames=frames,
        )


@dataclass
class EventRecord:
    """A diagnostic event accepted for submission."""

    message: str
    severity: Severity
    tags: dict[str, str] = field(default_factory=dict)
    exception: ExceptionDetail | None = None
    logger: str = "eventgate"
    event_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_message(cls, message: str, severity: Severity) -> "EventRecord":
        return cls(message=message, severity=severity)

    @classmethod
    def from_exception(cls, exc: BaseException, severity: Severity) -> "EventRecord":
        """Build an event whose content comes from an exception.

        The message defaults to the exception's own text, falling back to the
        exception type name when the exception has no text.
        """
        detail = ExceptionDetail.from_exception(exc)
        return cls(message=detail.value or detail.type, severity=severity, exception=detail)
