"""Duplicate content grouping within one index."""

from __future__ import annotations

from collections import defaultdict

from dirdrift.index.models import Computed, DuplicateGroup
from dirdrift.index.tree import TreeIndex


def find_duplicates(index: TreeIndex) -> tuple[DuplicateGroup, ...]:
    """Group paths sharing one computed digest; singletons are dropped."""
    by_digest: dict[bytes, list[str]] = defaultdict(list)
    for entry in index.entries():
        if not isinstance(entry.digest, Computed):
            # Skipped digests carry no content identity.
            continue
        by_digest[entry.digest.value].append(entry.path)

    groups = [
        DuplicateGroup(digest=Computed(value), paths=tuple(sorted(paths)))
        for value, paths in by_digest.items()
        if len(paths) >= 2
    ]
    groups.sort(key=lambda group: group.paths)
    return tuple(groups)
