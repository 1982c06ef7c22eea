"""Structured JSONL log records."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from typing import TextIO

METADATA_FIELDS = (
    "count",
    "normalized_path",
    "path",
    "previous_path",
    "reason",
    "root",
    "seconds",
    "side",
)


@dataclass(slots=True, frozen=True)
class LogEvent:
    """Sanitized representation of a single log record."""

    timestamp: str
    level: str
    logger: str
    message: str
    metadata: dict[str, object]


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def event_metadata(record: logging.LogRecord) -> dict[str, object]:
    """Collect allow-listed structured fields passed through ``extra``."""
    metadata: dict[str, object] = {}
    for key in METADATA_FIELDS:
        if not hasattr(record, key):
            continue
        value = getattr(record, key)
        if isinstance(value, (str, int, float, bool)) or value is None:
            metadata[key] = value
            continue
        metadata[key] = str(value)
    return metadata


class JsonlLogHandler(logging.Handler):
    """Write one sorted-key JSON object per log record."""

    def __init__(self, stream: TextIO) -> None:
        super().__init__()
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        """Return the destination stream."""
        return self._stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            event = LogEvent(
                timestamp=utc_timestamp(),
                level=record.levelname,
                logger=record.name,
                message=record.getMessage(),
                metadata=event_metadata(record),
            )
            self._stream.write(json.dumps(asdict(event), sort_keys=True))
            self._stream.write("\n")
            self._stream.flush()
        except Exception:
            self.handleError(record)
