"""Severity levels for emitted events."""

from enum import Enum


class ThresholdParseError(ValueError):
    """Raised when a name does not match any severity."""

    pass


class Severity(Enum):
    """Event severity levels, most severe first.

    The value is the rank: a lower rank is more severe.
    """

    FATAL = 0
    ERROR = 1
    WARNING = 2
    INFO = 3
    DEBUG = 4

    @property
    def level(self) -> str:
        """Lowercase level name as the collector expects it."""
        return self.name.lower()

    @classmethod
    def from_name(cls, name: str) -> "Severity":
        """Parse a severity name such as 'Error' or 'warning'.

        Raises:
            ThresholdParseError: If the name is not a known severity.
        """
        if not isinstance(name, str):
            raise ThresholdParseError(f"Unknown severity: {name!r}")
        try:
            return cls[name.strip().upper()]
        except KeyError as e:
            raise ThresholdParseError(f"Unknown severity: {name!r}") from e


def is_at_least_as_severe_as(a: Severity, b: Severity) -> bool:
    """Return True if `a` is as severe as `b` or more."""
    return a.value <= b.value
