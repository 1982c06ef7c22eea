from __future__ import annotations

from pathlib import Path

import pytest

from dirdrift.config import (
    CliOverrides,
    CompareConfig,
    HashingConfig,
    default_max_workers,
    load_effective_config,
)


def test_merge_order_defaults_then_file_then_cli(tmp_path: Path) -> None:
    config_path = tmp_path / "dirdrift.toml"
    config_path.write_text(
        "\n".join(
            [
                "[compare]",
                "diff = true",
                "hash = false",
                "",
                "[scan]",
                'symlinks = "follow"',
                'exclude_globs = ["**/.git/**"]',
                "",
                "[hashing]",
                "max_workers = 3",
                'on_error = "continue"',
            ]
        ),
        encoding="utf-8",
    )
    overrides = CliOverrides(hashing_enabled=True, max_workers=9)

    config = load_effective_config(config_path=config_path, overrides=overrides)

    assert config.diff_enabled is True
    assert config.hashing_enabled is True
    assert config.duplicates_enabled is False
    assert config.scan.symlinks == "follow"
    assert config.scan.exclude_globs == ("**/.git/**",)
    assert config.hashing.max_workers == 9
    assert config.hashing.on_error == "continue"


def test_config_file_in_working_directory_is_picked_up(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "dirdrift.toml").write_text("[compare]\nduplicates = true\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    config = load_effective_config()

    assert config.duplicates_enabled is True


def test_defaults_without_any_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    config = load_effective_config()

    assert config.diff_enabled is False
    assert config.hashing_enabled is False
    assert config.scan.symlinks == "skip"
    assert config.hashing.on_error == "abort"
    assert config.hashing.max_workers == default_max_workers()


def test_duplicates_force_hashing_on() -> None:
    config = CompareConfig(duplicates_enabled=True, hashing_enabled=False)

    assert config.hashing_enabled is True


def test_duplicates_override_forces_hashing_even_when_file_disables_it(tmp_path: Path) -> None:
    config_path = tmp_path / "custom.toml"
    config_path.write_text("[compare]\nhash = false\n", encoding="utf-8")

    config = load_effective_config(
        config_path=config_path, overrides=CliOverrides(duplicates_enabled=True)
    )

    assert config.hashing_enabled is True


def test_unset_worker_count_falls_back_to_default() -> None:
    assert CompareConfig(hashing=HashingConfig(max_workers=0)).hashing.max_workers == (
        default_max_workers()
    )
