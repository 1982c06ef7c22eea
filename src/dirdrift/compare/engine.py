"""Two-tree scan, hash and compare orchestration."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import asdict, dataclass
from pathlib import Path

from dirdrift.compare.diff import diff_indexes
from dirdrift.compare.duplicates import find_duplicates
from dirdrift.config import CompareConfig
from dirdrift.index.models import DiffResult, DuplicateGroup, FileError, PathCollision
from dirdrift.index.tree import HashProgress, TreeIndex, build_tree_index

logger = logging.getLogger("dirdrift.compare")

SIDE_A = "A"
SIDE_B = "B"


@dataclass(slots=True, frozen=True)
class TreeSummary:
    """Per-tree findings that do not depend on the other side."""

    root: str
    file_count: int
    duplicates: tuple[DuplicateGroup, ...]
    collisions: tuple[PathCollision, ...]
    errors: tuple[FileError, ...]


@dataclass(slots=True, frozen=True)
class ComparisonReport:
    """Complete result of comparing tree A with tree B."""

    config: CompareConfig
    a: TreeSummary
    b: TreeSummary
    diff: DiffResult

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable view with hex-encoded digests."""
        return {
            "config": self.config.to_public_dict(),
            "a": _summary_to_dict(self.a),
            "b": _summary_to_dict(self.b),
            "a_only": list(self.diff.a_only),
            "b_only": list(self.diff.b_only),
            "mismatches": [
                {
                    "path": item.path,
                    "digest_a": item.digest_a.hex(),
                    "digest_b": item.digest_b.hex(),
                }
                for item in self.diff.mismatches
            ],
        }


def compare_trees(
    root_a: Path,
    root_b: Path,
    config: CompareConfig,
    *,
    progress: HashProgress | None = None,
) -> ComparisonReport:
    """Index both trees in parallel, then diff them and find duplicates.

    Both trees share one hashing pool, so in-flight hashing never exceeds
    ``config.hashing.max_workers``. The first fatal error cancels the
    remaining work of both trees and is re-raised.
    """
    cancel = threading.Event()
    with ThreadPoolExecutor(
        max_workers=config.hashing.max_workers, thread_name_prefix="dirdrift-hash"
    ) as hash_pool:
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="dirdrift-scan") as scan_pool:
            futures = [
                scan_pool.submit(
                    build_tree_index,
                    Path(root),
                    config,
                    label=label,
                    executor=hash_pool,
                    progress=progress,
                    cancel=cancel,
                )
                for root, label in ((root_a, SIDE_A), (root_b, SIDE_B))
            ]
            try:
                wait(futures, return_when=FIRST_EXCEPTION)
                for future in futures:
                    if future.done() and future.exception() is not None:
                        future.result()
                index_a, index_b = (future.result() for future in futures)
            except BaseException as error:
                cancel.set()
                logger.error("comparison aborted: %s", error, extra={"reason": str(error)})
                raise

    return build_report(index_a, index_b, config)


def build_report(index_a: TreeIndex, index_b: TreeIndex, config: CompareConfig) -> ComparisonReport:
    """Run the compare phase over two frozen indexes."""
    if not (index_a.frozen and index_b.frozen):
        raise RuntimeError("Both indexes must be fully built before comparing.")
    diff = diff_indexes(index_a, index_b)
    logger.info(
        "compared trees: %d only in A, %d only in B, %d mismatches",
        len(diff.a_only),
        len(diff.b_only),
        len(diff.mismatches),
        extra={"count": len(diff.mismatches)},
    )
    return ComparisonReport(
        config=config,
        a=_summarize(index_a, config),
        b=_summarize(index_b, config),
        diff=diff,
    )


def _summarize(index: TreeIndex, config: CompareConfig) -> TreeSummary:
    duplicates = find_duplicates(index) if config.duplicates_enabled else ()
    return TreeSummary(
        root=str(index.root),
        file_count=len(index),
        duplicates=duplicates,
        collisions=index.collisions,
        errors=index.errors,
    )


def _summary_to_dict(summary: TreeSummary) -> dict[str, object]:
    return {
        "root": summary.root,
        "file_count": summary.file_count,
        "duplicates": [
            {"digest": group.digest.hex(), "paths": list(group.paths)}
            for group in summary.duplicates
        ],
        "collisions": [asdict(item) for item in summary.collisions],
        "errors": [asdict(item) for item in summary.errors],
    }
