"""eventgate - severity-filtered event forwarding to a Sentry-compatible collector."""

__version__ = "0.1.0"
