"""Deterministic directory traversal into relative file paths."""

from __future__ import annotations

import fnmatch
import logging
import os
import stat
from pathlib import Path

from dirdrift.config import ScanConfig
from dirdrift.paths import relative_posix

logger = logging.getLogger("dirdrift.index")


class ScanError(Exception):
    """Raised when a tree cannot be fully enumerated."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{reason}: {path}")
        self.path = path
        self.reason = reason


def scan_tree(root: Path, config: ScanConfig | None = None) -> tuple[str, ...]:
    """Return every regular file under root as sorted relative POSIX paths."""
    settings = config or ScanConfig()
    base = Path(root)
    if not base.exists():
        raise ScanError(str(base), "Root does not exist")
    if not base.is_dir():
        raise ScanError(str(base), "Root is not a directory")

    excluded_dir_names = _excluded_dir_names(settings.exclude_globs)
    visited: set[tuple[int, int]] = set()
    root_stat = base.stat()
    visited.add((root_stat.st_dev, root_stat.st_ino))

    files: list[str] = []
    stack: list[Path] = [base]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                ordered_entries = sorted(entries, key=lambda item: item.name)
        except OSError as error:
            raise ScanError(str(current), _os_reason(error)) from error
        for entry in reversed(ordered_entries):
            full_path = Path(entry.path)
            relative = relative_posix(base, full_path)
            try:
                child = _classify(entry, settings.symlinks)
            except OSError as error:
                raise ScanError(str(full_path), _os_reason(error)) from error
            if child is None:
                continue
            if child == "dir":
                if entry.name in excluded_dir_names and should_exclude(
                    f"{relative}/", settings.exclude_globs
                ):
                    continue
                try:
                    identity = _dir_identity(full_path)
                except OSError as error:
                    raise ScanError(str(full_path), _os_reason(error)) from error
                if identity in visited:
                    logger.debug("Skipping already visited directory %s", relative)
                    continue
                visited.add(identity)
                stack.append(full_path)
                continue
            if should_exclude(relative, settings.exclude_globs):
                continue
            files.append(relative)
    files.sort()
    return tuple(files)


def should_exclude(relative_path: str, exclude_globs: tuple[str, ...]) -> bool:
    """Return True when a path matches configured exclude globs."""
    anchored = f"/{relative_path}"
    return any(
        fnmatch.fnmatch(relative_path, pattern) or fnmatch.fnmatch(anchored, pattern)
        for pattern in exclude_globs
    )


def _classify(entry: os.DirEntry[str], symlinks: str) -> str | None:
    """Return 'dir', 'file' or None (not emitted) under the symlink policy."""
    if entry.is_symlink():
        if symlinks == "error":
            raise ScanError(entry.path, "Symbolic link encountered")
        if symlinks == "skip":
            logger.debug("Skipping symbolic link %s", entry.path)
            return None
        try:
            mode = os.stat(entry.path).st_mode
        except FileNotFoundError as error:
            raise ScanError(entry.path, "Broken symbolic link") from error
    else:
        mode = entry.stat(follow_symlinks=False).st_mode
    if stat.S_ISDIR(mode):
        return "dir"
    if stat.S_ISREG(mode):
        return "file"
    logger.debug("Skipping special file %s", entry.path)
    return None


def _dir_identity(path: Path) -> tuple[int, int]:
    info = path.stat()
    return info.st_dev, info.st_ino


def _excluded_dir_names(exclude_globs: tuple[str, ...]) -> set[str]:
    """Extract directory-name prunes from **/name/** glob patterns."""
    output: set[str] = set()
    for pattern in exclude_globs:
        if not pattern.startswith("**/") or not pattern.endswith("/**"):
            continue
        name = pattern[3:-3].strip("/")
        if not name:
            continue
        if any(char in name for char in "*?[]{}"):
            continue
        output.add(name)
    return output


def _os_reason(error: OSError) -> str:
    return error.strerror or error.__class__.__name__
