from __future__ import annotations

from pathlib import Path

import pytest

from dirdrift.config import CliOverrides, HashingConfig, ScanConfig, load_effective_config


def _write(tmp_path: Path, *lines: str) -> Path:
    config_path = tmp_path / "dirdrift.toml"
    config_path.write_text("\n".join(lines), encoding="utf-8")
    return config_path


def test_invalid_worker_type_raises_value_error(tmp_path: Path) -> None:
    path = _write(tmp_path, "[hashing]", 'max_workers = "many"')

    with pytest.raises(ValueError, match="hashing.max_workers"):
        load_effective_config(config_path=path)


def test_worker_cap_is_enforced(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="must be <= 256"):
        load_effective_config(
            config_path=_write(tmp_path, ""), overrides=CliOverrides(max_workers=10_000)
        )


def test_invalid_section_type_raises_value_error(tmp_path: Path) -> None:
    path = _write(tmp_path, 'scan = "not-a-table"')

    with pytest.raises(ValueError, match="section 'scan'"):
        load_effective_config(config_path=path)


def test_unknown_symlink_policy_is_rejected(tmp_path: Path) -> None:
    path = _write(tmp_path, "[scan]", 'symlinks = "ignore"')

    with pytest.raises(ValueError, match="scan.symlinks"):
        load_effective_config(config_path=path)


def test_non_boolean_flag_is_rejected(tmp_path: Path) -> None:
    path = _write(tmp_path, "[compare]", 'diff = "yes"')

    with pytest.raises(ValueError, match="compare.diff"):
        load_effective_config(config_path=path)


def test_exclude_globs_must_be_strings(tmp_path: Path) -> None:
    path = _write(tmp_path, "[scan]", "exclude_globs = [1, 2]")

    with pytest.raises(ValueError, match="scan.exclude_globs"):
        load_effective_config(config_path=path)


def test_explicit_missing_config_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="does not exist"):
        load_effective_config(config_path=tmp_path / "nope.toml")


def test_directly_built_scan_config_rejects_unknown_symlink_policy() -> None:
    with pytest.raises(ValueError, match="Symlink policy"):
        ScanConfig(symlinks="ignore")


def test_directly_built_hashing_config_rejects_unknown_error_policy() -> None:
    with pytest.raises(ValueError, match="Hash error policy"):
        HashingConfig(on_error="retry")
