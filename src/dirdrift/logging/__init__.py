"""Structured logging utilities."""

from .events import LogEvent, JsonlLogHandler, event_metadata, utc_timestamp
from .setup import LOGGER_NAME, configure_logging

__all__ = [
    "LOGGER_NAME",
    "JsonlLogHandler",
    "LogEvent",
    "configure_logging",
    "event_metadata",
    "utc_timestamp",
]
