"""Terminal rendering of comparison reports."""

from __future__ import annotations

import json
import threading
from typing import TextIO

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TaskID, TextColumn

from dirdrift.compare.engine import SIDE_A, SIDE_B, ComparisonReport, TreeSummary
from dirdrift.index.models import render_listing
from dirdrift.paths import display_path


def build_console(stream: TextIO | None = None, color: bool = True) -> Console:
    """Console writing to stream (stdout by default), optionally without color."""
    return Console(
        file=stream, no_color=not color, highlight=False, emoji=False, soft_wrap=True
    )


class RichProgress:
    """Hashing progress bars, one task per tree."""

    def __init__(self, console: Console) -> None:
        self._progress = Progress(
            TextColumn("{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            console=console,
            transient=True,
        )
        self._tasks: dict[str, TaskID] = {}
        self._lock = threading.Lock()

    @property
    def progress(self) -> Progress:
        return self._progress

    def __enter__(self) -> RichProgress:
        self._progress.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._progress.stop()

    def start(self, label: str, total: int) -> None:
        with self._lock:
            self._tasks[label] = self._progress.add_task(f"hashing {label}", total=total)

    def advance(self, label: str) -> None:
        task_id = self._tasks.get(label)
        if task_id is not None:
            self._progress.advance(task_id)


def render_report(report: ComparisonReport, console: Console) -> None:
    """Print listings, mismatches, duplicates and per-file errors."""
    config = report.config
    if config.diff_enabled:
        console.print("only in A:", style="cyan", markup=False)
        console.print(_listing(report.diff.a_only), style="cyan", markup=False)
        console.print()
        console.print("only in B:", style="yellow", markup=False)
        console.print(_listing(report.diff.b_only), style="yellow", markup=False)

    for mismatch in report.diff.mismatches:
        console.print(
            f"content mismatch: {display_path(mismatch.path)} "
            f"({mismatch.digest_a.hex()}, {mismatch.digest_b.hex()})",
            style="red",
            markup=False,
        )

    if config.duplicates_enabled:
        _render_duplicates(SIDE_A, report.a, console)
        _render_duplicates(SIDE_B, report.b, console)

    for side, summary in ((SIDE_A, report.a), (SIDE_B, report.b)):
        for error in summary.errors:
            console.print(
                f"unreadable file in {side}: {display_path(error.path)} ({error.reason})",
                style="bold red",
                markup=False,
            )


def render_json(report: ComparisonReport, stream: TextIO) -> None:
    """Write the report as one sorted-key JSON document."""
    stream.write(json.dumps(report.to_dict(), sort_keys=True, indent=2))
    stream.write("\n")


def _render_duplicates(side: str, summary: TreeSummary, console: Console) -> None:
    for group in summary.duplicates:
        console.print(
            f"duplicate files in {side}: {', '.join(map(display_path, group.paths))}",
            style="magenta",
            markup=False,
        )


def _listing(paths: tuple[str, ...]) -> str:
    return display_path(render_listing(paths))
