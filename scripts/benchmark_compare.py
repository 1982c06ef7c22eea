#!/usr/bin/env python3
"""Time two-tree comparisons over synthetic fixtures across worker counts."""

from __future__ import annotations

import argparse
import json
import statistics
import sys
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path

from dirdrift.compare import compare_trees
from dirdrift.config import CompareConfig, HashingConfig

SCENARIOS = {
    "small": (4, 25, 4 * 1024),
    "medium": (8, 100, 16 * 1024),
    "large": (16, 250, 64 * 1024),
}


@dataclass(frozen=True, slots=True)
class FixtureProfile:
    """Shape of one generated pair of trees."""

    directories: int
    files_per_directory: int
    file_bytes: int
    drift_every: int = 10


@dataclass(slots=True)
class BenchmarkRun:
    """Timing for one comparison."""

    workers: int
    run_index: int
    elapsed_seconds: float
    files_a: int
    files_b: int
    mismatches: int


def parse_workers(raw: str) -> list[int]:
    values: list[int] = []
    for item in raw.split(","):
        stripped = item.strip()
        if not stripped:
            continue
        value = int(stripped)
        if value < 1:
            raise SystemExit(f"Worker counts must be positive, got {value}.")
        if value not in values:
            values.append(value)
    if not values:
        raise SystemExit("At least one worker count is required.")
    return values


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--scenario", choices=sorted(SCENARIOS), default="small")
    parser.add_argument("--workers", default="1,4,16", help="Comma-separated worker counts.")
    parser.add_argument("--runs", type=int, default=3, help="Runs per worker count.")
    parser.add_argument("--fixture-dir", default=None, help="Reuse or create fixtures here.")
    return parser.parse_args(argv)


def write_fixture_trees(fixture_root: Path, profile: FixtureProfile) -> tuple[Path, Path]:
    """Write trees A and B; every drift_every-th file differs in B."""
    tree_a = fixture_root / "a"
    tree_b = fixture_root / "b"
    counter = 0
    for dir_idx in range(profile.directories):
        for tree in (tree_a, tree_b):
            (tree / f"dir_{dir_idx:03d}").mkdir(parents=True, exist_ok=True)
        for file_idx in range(profile.files_per_directory):
            relative = Path(f"dir_{dir_idx:03d}") / f"file_{file_idx:04d}.bin"
            seed = f"{dir_idx}:{file_idx}:".encode("utf-8")
            payload = (seed * (profile.file_bytes // len(seed) + 1))[: profile.file_bytes]
            (tree_a / relative).write_bytes(payload)
            if counter % profile.drift_every == 0:
                (tree_b / relative).write_bytes(payload[::-1])
            else:
                (tree_b / relative).write_bytes(payload)
            counter += 1
    return tree_a, tree_b


def run_one(tree_a: Path, tree_b: Path, workers: int, run_index: int) -> BenchmarkRun:
    config = CompareConfig(
        diff_enabled=True,
        hashing_enabled=True,
        duplicates_enabled=True,
        hashing=HashingConfig(max_workers=workers),
    )
    started = time.perf_counter()
    report = compare_trees(tree_a, tree_b, config)
    elapsed = time.perf_counter() - started
    return BenchmarkRun(
        workers=workers,
        run_index=run_index,
        elapsed_seconds=elapsed,
        files_a=report.a.file_count,
        files_b=report.b.file_count,
        mismatches=len(report.diff.mismatches),
    )


def summarize_runs(runs: list[BenchmarkRun]) -> dict[str, object]:
    by_workers: dict[str, dict[str, float]] = {}
    for workers in sorted({run.workers for run in runs}):
        values = [run.elapsed_seconds for run in runs if run.workers == workers]
        by_workers[str(workers)] = {
            "min_seconds": min(values),
            "max_seconds": max(values),
            "mean_seconds": statistics.fmean(values),
        }
    return {
        "runs": len(runs),
        "files": runs[0].files_a if runs else 0,
        "mismatches": sorted({run.mismatches for run in runs}),
        "elapsed_by_workers": by_workers,
    }


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    workers = parse_workers(args.workers)
    directories, files_per_directory, file_bytes = SCENARIOS[args.scenario]
    profile = FixtureProfile(
        directories=directories,
        files_per_directory=files_per_directory,
        file_bytes=file_bytes,
    )
    with tempfile.TemporaryDirectory(prefix="dirdrift-bench-") as scratch:
        fixture_root = Path(args.fixture_dir) if args.fixture_dir else Path(scratch)
        tree_a, tree_b = write_fixture_trees(fixture_root / args.scenario, profile)
        runs = [
            run_one(tree_a, tree_b, count, run_index)
            for count in workers
            for run_index in range(args.runs)
        ]
    summary = summarize_runs(runs)
    summary["scenario"] = args.scenario
    sys.stdout.write(json.dumps(summary, sort_keys=True, indent=2))
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
