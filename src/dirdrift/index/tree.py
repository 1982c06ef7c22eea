"""Per-tree path-to-digest index populated by concurrent hashing tasks."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterator
from concurrent.futures import Executor, Future, ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Protocol

from dirdrift.config import CompareConfig
from dirdrift.index.discovery import scan_tree
from dirdrift.index.hashing import ContentHasher, HashError
from dirdrift.index.models import SKIPPED, Digest, FileEntry, FileError, PathCollision
from dirdrift.paths import normalize_key

logger = logging.getLogger("dirdrift.index")


class IndexingCancelled(Exception):
    """Raised when a tree build stops because the run was aborted elsewhere."""

    def __init__(self, label: str) -> None:
        super().__init__(f"Indexing of tree {label} was cancelled.")
        self.label = label


class HashProgress(Protocol):
    """Receives hashing progress for one tree."""

    def start(self, label: str, total: int) -> None: ...

    def advance(self, label: str) -> None: ...


class NullProgress:
    """Progress sink that discards updates."""

    def start(self, label: str, total: int) -> None:
        return None

    def advance(self, label: str) -> None:
        return None


class TreeIndex:
    """Normalized relative path -> digest table for one tree.

    Writes are serialized by an internal lock that covers only the table
    mutation. Once frozen the index is read-only.
    """

    def __init__(self, root: Path, label: str = "") -> None:
        self._root = Path(root)
        self._label = label or str(root)
        self._digests: dict[str, Digest] = {}
        self._origins: dict[str, str] = {}
        self._collisions: list[PathCollision] = []
        self._errors: list[FileError] = []
        self._lock = threading.Lock()
        self._frozen = False

    @property
    def root(self) -> Path:
        return self._root

    @property
    def label(self) -> str:
        return self._label

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def collisions(self) -> tuple[PathCollision, ...]:
        """Collisions sorted by normalized path, then by winning path."""
        return tuple(sorted(self._collisions, key=lambda item: (item.normalized_path, item.path)))

    @property
    def errors(self) -> tuple[FileError, ...]:
        return tuple(sorted(self._errors, key=lambda item: item.path))

    def insert(self, path: str, digest: Digest) -> PathCollision | None:
        """Insert one file under its normalized key.

        Of two colliding paths the one that sorts last wins, which is the last
        writer in scan order no matter which hashing task finishes first.
        """
        key = normalize_key(path)
        with self._lock:
            if self._frozen:
                raise RuntimeError(f"TreeIndex for {self._label} is frozen.")
            previous = self._origins.get(key)
            if previous is None or previous == path:
                self._digests[key] = digest
                self._origins[key] = path
                return None
            if path > previous:
                self._digests[key] = digest
                self._origins[key] = path
                kept, dropped = path, previous
            else:
                kept, dropped = previous, path
            collision = PathCollision(normalized_path=key, previous_path=dropped, path=kept)
            self._collisions.append(collision)
        logger.warning(
            "path collision: %s",
            key,
            extra={
                "side": self._label,
                "normalized_path": key,
                "previous_path": dropped,
                "path": kept,
            },
        )
        return collision

    def record_error(self, path: str, reason: str) -> None:
        """Record an unreadable file and keep it as a name-only entry."""
        self.insert(path, SKIPPED)
        with self._lock:
            self._errors.append(FileError(path=path, reason=reason))

    def freeze(self) -> None:
        with self._lock:
            self._frozen = True

    def get(self, key: str) -> Digest | None:
        return self._digests.get(key)

    def original_path(self, key: str) -> str | None:
        return self._origins.get(key)

    def keys(self) -> set[str]:
        return set(self._digests)

    def entries(self) -> Iterator[FileEntry]:
        """Yield entries in sorted key order."""
        for key in sorted(self._digests):
            yield FileEntry(path=key, original_path=self._origins[key], digest=self._digests[key])

    def __contains__(self, key: object) -> bool:
        return key in self._digests

    def __len__(self) -> int:
        return len(self._digests)


def build_tree_index(
    root: Path,
    config: CompareConfig,
    *,
    label: str = "",
    executor: Executor | None = None,
    progress: HashProgress | None = None,
    cancel: threading.Event | None = None,
) -> TreeIndex:
    """Scan root and hash every file into a frozen TreeIndex.

    Hashing runs on ``executor`` (or a private pool sized by
    ``config.hashing.max_workers``), so in-flight file handles stay bounded.
    Setting ``cancel`` makes queued hashing tasks return without reading and
    stops the build with IndexingCancelled.
    """
    started = time.perf_counter()
    base = Path(root)
    index = TreeIndex(base, label=label)
    sink = progress or NullProgress()
    stop = cancel or threading.Event()
    paths = scan_tree(base, config.scan)
    logger.info(
        "scanned %d files under %s",
        len(paths),
        base,
        extra={"root": str(base), "count": len(paths), "side": index.label},
    )
    if stop.is_set():
        raise IndexingCancelled(index.label)
    sink.start(index.label, len(paths))

    hasher = ContentHasher(config.hashing_enabled)
    if executor is None:
        with ThreadPoolExecutor(
            max_workers=config.hashing.max_workers, thread_name_prefix="dirdrift-hash"
        ) as pool:
            _populate(index, paths, hasher, pool, config.hashing.on_error, sink, stop)
    else:
        _populate(index, paths, hasher, executor, config.hashing.on_error, sink, stop)

    index.freeze()
    elapsed = time.perf_counter() - started
    logger.info(
        "indexed %d files under %s in %.3fs",
        len(index),
        base,
        extra={"root": str(base), "count": len(index), "seconds": elapsed, "side": index.label},
    )
    return index


def _populate(
    index: TreeIndex,
    paths: tuple[str, ...],
    hasher: ContentHasher,
    executor: Executor,
    on_error: str,
    progress: HashProgress,
    cancel: threading.Event,
) -> None:
    def hash_and_insert(path: str) -> None:
        if cancel.is_set():
            return
        digest = hasher.digest(index.root / path)
        index.insert(path, digest)

    futures: dict[Future[None], str] = {
        executor.submit(hash_and_insert, path): path for path in paths
    }
    try:
        for future in as_completed(futures):
            if cancel.is_set():
                raise IndexingCancelled(index.label)
            path = futures[future]
            try:
                future.result()
            except HashError as error:
                if on_error != "continue":
                    raise
                logger.warning(
                    "unreadable file %s: %s",
                    path,
                    error.reason,
                    extra={"side": index.label, "path": path, "reason": error.reason},
                )
                index.record_error(path, error.reason)
            progress.advance(index.label)
    except BaseException:
        for pending in futures:
            pending.cancel()
        raise
