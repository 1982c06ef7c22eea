from __future__ import annotations

import importlib.util
import sys
from pathlib import Path

import pytest


def _load_benchmark_module():
    script_path = Path(__file__).resolve().parents[2] / "scripts" / "benchmark_compare.py"
    spec = importlib.util.spec_from_file_location("benchmark_compare", script_path)
    assert spec is not None
    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    loader = spec.loader
    assert loader is not None
    loader.exec_module(module)
    return module


def test_parse_workers_dedupes_and_preserves_order() -> None:
    module = _load_benchmark_module()
    assert module.parse_workers("4, 1, 4,16") == [4, 1, 16]


def test_parse_workers_rejects_non_positive() -> None:
    module = _load_benchmark_module()
    with pytest.raises(SystemExit):
        module.parse_workers("0")


def test_fixture_trees_drift_on_schedule(tmp_path: Path) -> None:
    module = _load_benchmark_module()
    profile = module.FixtureProfile(
        directories=2, files_per_directory=5, file_bytes=64, drift_every=5
    )

    tree_a, tree_b = module.write_fixture_trees(tmp_path, profile)
    run = module.run_one(tree_a, tree_b, workers=2, run_index=0)

    assert run.files_a == 10
    assert run.files_b == 10
    assert run.mismatches == 2


def test_summarize_runs_groups_by_worker_count() -> None:
    module = _load_benchmark_module()
    runs = [
        module.BenchmarkRun(
            workers=workers,
            run_index=index,
            elapsed_seconds=elapsed,
            files_a=3,
            files_b=3,
            mismatches=1,
        )
        for workers, index, elapsed in ((1, 0, 2.0), (1, 1, 4.0), (8, 0, 1.0))
    ]

    summary = module.summarize_runs(runs)

    assert summary["runs"] == 3
    assert summary["elapsed_by_workers"]["1"]["mean_seconds"] == 3.0
    assert summary["elapsed_by_workers"]["8"]["min_seconds"] == 1.0
