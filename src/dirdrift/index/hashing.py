"""Per-file content hashing."""

from __future__ import annotations

import hashlib
from pathlib import Path

from dirdrift.index.models import SKIPPED, Computed, Digest

HASH_CHUNK_BYTES = 1024 * 128


class HashError(OSError):
    """Raised when a file cannot be opened or read while hashing."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{reason}: {path}")
        self.path = path
        self.reason = reason


class ContentHasher:
    """Compute SHA-256 digests, or the skipped marker when hashing is off."""

    def __init__(self, hashing_enabled: bool) -> None:
        self._enabled = hashing_enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def digest(self, path: Path) -> Digest:
        """Return the digest for one file without holding any shared state."""
        if not self._enabled:
            return SKIPPED
        try:
            return Computed(sha256_file(path))
        except OSError as error:
            raise HashError(str(path), error.strerror or error.__class__.__name__) from error


def sha256_file(path: Path) -> bytes:
    """Compute SHA-256 hash in deterministic chunked reads."""
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        while True:
            chunk = handle.read(HASH_CHUNK_BYTES)
            if not chunk:
                break
            digest.update(chunk)
    return digest.digest()
