"""Cross-tree comparison of two frozen indexes."""

from __future__ import annotations

from dirdrift.index.models import Computed, ContentMismatch, DiffResult
from dirdrift.index.tree import TreeIndex


def diff_indexes(a: TreeIndex, b: TreeIndex) -> DiffResult:
    """Compute keys unique to each side and content mismatches on shared keys.

    A shared key is content-compared only when both digests are computed;
    a skipped digest on either side makes the comparison name-only.
    """
    a_keys = a.keys()
    b_keys = b.keys()

    mismatches: list[ContentMismatch] = []
    for key in sorted(a_keys & b_keys):
        digest_a = a.get(key)
        digest_b = b.get(key)
        if not isinstance(digest_a, Computed) or not isinstance(digest_b, Computed):
            continue
        if digest_a.value != digest_b.value:
            mismatches.append(ContentMismatch(path=key, digest_a=digest_a, digest_b=digest_b))

    return DiffResult(
        a_only=tuple(sorted(a_keys - b_keys)),
        b_only=tuple(sorted(b_keys - a_keys)),
        mismatches=tuple(mismatches),
    )
