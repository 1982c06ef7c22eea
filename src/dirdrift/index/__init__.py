"""Tree scanning, hashing and indexing package."""

from .discovery import ScanError, scan_tree, should_exclude
from .hashing import ContentHasher, HashError, sha256_file
from .models import (
    SKIPPED,
    Computed,
    ContentMismatch,
    DiffResult,
    Digest,
    DuplicateGroup,
    FileEntry,
    FileError,
    PathCollision,
    Skipped,
    render_listing,
)
from .tree import HashProgress, IndexingCancelled, NullProgress, TreeIndex, build_tree_index

__all__ = [
    "SKIPPED",
    "Computed",
    "ContentHasher",
    "ContentMismatch",
    "DiffResult",
    "Digest",
    "DuplicateGroup",
    "FileEntry",
    "FileError",
    "HashError",
    "HashProgress",
    "IndexingCancelled",
    "NullProgress",
    "PathCollision",
    "ScanError",
    "Skipped",
    "TreeIndex",
    "build_tree_index",
    "render_listing",
    "scan_tree",
    "sha256_file",
    "should_exclude",
]
