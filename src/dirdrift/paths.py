"""Relative path helpers shared by scanning and indexing."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Final

WINDOWS_DRIVE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z]:/")


def normalize_separators(candidate: str) -> str:
    """Return a relative POSIX-style path with no leading root or './' segments."""
    normalized = candidate.replace("\\", "/")
    if WINDOWS_DRIVE_PATTERN.match(normalized):
        normalized = normalized[3:]
    parts = [part for part in normalized.split("/") if part not in ("", ".")]
    return "/".join(parts)


def normalize_key(relative_path: str) -> str:
    """Fold a relative path into its index key.

    Keys are lower-cased so names that differ only by case, which would clash
    on a case-insensitive filesystem, land on the same key.
    """
    return normalize_separators(relative_path).lower()


def relative_posix(root: Path, full_path: Path) -> str:
    """Express full_path relative to root without resolving symlinks."""
    return full_path.relative_to(root).as_posix()


def display_path(path: str) -> str:
    """Printable form of a path whose undecodable bytes arrived as surrogates."""
    return os.fsencode(path).decode("utf-8", "backslashreplace")
