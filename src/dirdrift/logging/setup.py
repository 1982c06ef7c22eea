"""Logger configuration for the dirdrift process."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from .events import JsonlLogHandler

LOGGER_NAME = "dirdrift"
LOG_FORMATS = ("text", "jsonl")


def configure_logging(
    level: int = logging.WARNING,
    log_format: str = "text",
    stream: TextIO | None = None,
) -> logging.Logger:
    """Install a single stderr handler on the dirdrift logger.

    Calling this again replaces the previous handler, so repeated runs in one
    process (tests, embedding) never duplicate output.
    """
    if log_format not in LOG_FORMATS:
        raise ValueError(f"Log format must be one of: {', '.join(LOG_FORMATS)}.")
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)

    target = stream if stream is not None else sys.stderr
    if log_format == "jsonl":
        handler: logging.Handler = JsonlLogHandler(target)
    else:
        handler = logging.StreamHandler(target)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger
