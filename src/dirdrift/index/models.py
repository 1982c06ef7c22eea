"""Typed models for tree indexing and comparison results."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Computed:
    """Content digest computed from a file's bytes."""

    value: bytes

    def hex(self) -> str:
        """Return the lowercase hex encoding of the digest."""
        return self.value.hex()


@dataclass(slots=True, frozen=True)
class Skipped:
    """Marker for a file whose content was not hashed."""


SKIPPED = Skipped()

Digest = Computed | Skipped


@dataclass(slots=True, frozen=True)
class FileEntry:
    """One indexed file keyed by its normalized relative path."""

    path: str
    original_path: str
    digest: Digest


@dataclass(slots=True, frozen=True)
class PathCollision:
    """Two original paths that normalize to the same index key."""

    normalized_path: str
    previous_path: str
    path: str


@dataclass(slots=True, frozen=True)
class FileError:
    """Per-file hashing failure recorded under the continue policy."""

    path: str
    reason: str


@dataclass(slots=True, frozen=True)
class ContentMismatch:
    """Same key on both sides with differing computed digests."""

    path: str
    digest_a: Computed
    digest_b: Computed


@dataclass(slots=True, frozen=True)
class DuplicateGroup:
    """Paths within one tree sharing an identical computed digest."""

    digest: Computed
    paths: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class DiffResult:
    """Cross-tree key differences plus content mismatches."""

    a_only: tuple[str, ...]
    b_only: tuple[str, ...]
    mismatches: tuple[ContentMismatch, ...]

    @property
    def is_clean(self) -> bool:
        return not (self.a_only or self.b_only or self.mismatches)


def render_listing(paths: tuple[str, ...] | list[str] | set[str]) -> str:
    """Return paths as a newline-joined, lexicographically sorted listing."""
    return "\n".join(sorted(paths))
