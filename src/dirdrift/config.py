"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

CONFIG_FILE_NAME = "dirdrift.toml"
MAX_WORKERS_CAP = 256

SYMLINK_POLICIES = ("skip", "follow", "error")
ERROR_POLICIES = ("abort", "continue")


def default_max_workers() -> int:
    """Match the thread-pool default sized to available parallelism."""
    return min(32, (os.cpu_count() or 1) + 4)


@dataclass(slots=True, frozen=True)
class ScanConfig:
    """Tree traversal settings."""

    symlinks: str = "skip"
    exclude_globs: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.symlinks not in SYMLINK_POLICIES:
            raise ValueError(f"Symlink policy must be one of: {', '.join(SYMLINK_POLICIES)}.")


@dataclass(slots=True, frozen=True)
class HashingConfig:
    """Content hashing settings."""

    max_workers: int = 0
    on_error: str = "abort"

    def __post_init__(self) -> None:
        if self.on_error not in ERROR_POLICIES:
            raise ValueError(f"Hash error policy must be one of: {', '.join(ERROR_POLICIES)}.")


@dataclass(slots=True, frozen=True)
class CompareConfig:
    """Fully merged, immutable configuration for one comparison run."""

    diff_enabled: bool = False
    hashing_enabled: bool = False
    duplicates_enabled: bool = False
    scan: ScanConfig = ScanConfig()
    hashing: HashingConfig = HashingConfig()

    def __post_init__(self) -> None:
        if self.duplicates_enabled and not self.hashing_enabled:
            # Duplicate detection needs content digests.
            object.__setattr__(self, "hashing_enabled", True)
        if self.hashing.max_workers < 1:
            object.__setattr__(
                self, "hashing", replace(self.hashing, max_workers=default_max_workers())
            )

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for reports."""
        return {
            "diff_enabled": self.diff_enabled,
            "hashing_enabled": self.hashing_enabled,
            "duplicates_enabled": self.duplicates_enabled,
            "scan": {
                "symlinks": self.scan.symlinks,
                "exclude_globs": list(self.scan.exclude_globs),
            },
            "hashing": {
                "max_workers": self.hashing.max_workers,
                "on_error": self.hashing.on_error,
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional command-line overrides applied at highest precedence."""

    diff_enabled: bool | None = None
    hashing_enabled: bool | None = None
    duplicates_enabled: bool | None = None
    max_workers: int | None = None
    on_error: str | None = None
    symlinks: str | None = None
    exclude_globs: tuple[str, ...] | None = None


def load_config_file(path: Path | None) -> dict[str, object]:
    """Load an explicit config file, or dirdrift.toml from the working directory."""
    explicit = path is not None
    config_path = path if path is not None else Path.cwd() / CONFIG_FILE_NAME
    if not config_path.exists():
        if explicit:
            raise ValueError(f"Config file '{config_path}' does not exist.")
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{config_path.name} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Config field '{section}.{field}' must contain only strings.")
        output.append(item)
    return tuple(output)


def _optional_bool(value: object, name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{name}' must be a boolean.")
    return value


def _optional_choice(value: object, name: str, default: str, choices: tuple[str, ...]) -> str:
    if value is None:
        return default
    if not isinstance(value, str) or value not in choices:
        raise ValueError(f"Config field '{name}' must be one of: {', '.join(choices)}.")
    return value


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return value


def merge_config(
    base: CompareConfig, file_payload: dict[str, object], overrides: CliOverrides
) -> CompareConfig:
    """Merge defaults, config file, then command-line overrides."""
    compare_payload = _get_table(file_payload, "compare")
    scan_payload = _get_table(file_payload, "scan")
    hashing_payload = _get_table(file_payload, "hashing")

    exclude_globs = base.scan.exclude_globs
    if "exclude_globs" in scan_payload:
        exclude_globs = _tuple_of_strings(scan_payload["exclude_globs"], "scan", "exclude_globs")

    merged = CompareConfig(
        diff_enabled=_optional_bool(compare_payload.get("diff"), "compare.diff", base.diff_enabled),
        hashing_enabled=_optional_bool(
            compare_payload.get("hash"), "compare.hash", base.hashing_enabled
        ),
        duplicates_enabled=_optional_bool(
            compare_payload.get("duplicates"), "compare.duplicates", base.duplicates_enabled
        ),
        scan=ScanConfig(
            symlinks=_optional_choice(
                scan_payload.get("symlinks"), "scan.symlinks", base.scan.symlinks, SYMLINK_POLICIES
            ),
            exclude_globs=exclude_globs,
        ),
        hashing=HashingConfig(
            max_workers=_optional_positive_int_with_cap(
                hashing_payload.get("max_workers"),
                "hashing.max_workers",
                base.hashing.max_workers,
                MAX_WORKERS_CAP,
            ),
            on_error=_optional_choice(
                hashing_payload.get("on_error"),
                "hashing.on_error",
                base.hashing.on_error,
                ERROR_POLICIES,
            ),
        ),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: CompareConfig, overrides: CliOverrides) -> CompareConfig:
    """Apply command-line overrides at highest precedence."""
    return CompareConfig(
        diff_enabled=_optional_bool(
            overrides.diff_enabled, "overrides.diff_enabled", config.diff_enabled
        ),
        hashing_enabled=_optional_bool(
            overrides.hashing_enabled, "overrides.hashing_enabled", config.hashing_enabled
        ),
        duplicates_enabled=_optional_bool(
            overrides.duplicates_enabled, "overrides.duplicates_enabled", config.duplicates_enabled
        ),
        scan=ScanConfig(
            symlinks=_optional_choice(
                overrides.symlinks, "overrides.symlinks", config.scan.symlinks, SYMLINK_POLICIES
            ),
            exclude_globs=(
                overrides.exclude_globs
                if overrides.exclude_globs is not None
                else config.scan.exclude_globs
            ),
        ),
        hashing=HashingConfig(
            max_workers=_optional_positive_int_with_cap(
                overrides.max_workers,
                "overrides.max_workers",
                config.hashing.max_workers,
                MAX_WORKERS_CAP,
            ),
            on_error=_optional_choice(
                overrides.on_error, "overrides.on_error", config.hashing.on_error, ERROR_POLICIES
            ),
        ),
    )


def load_effective_config(
    config_path: Path | None = None, overrides: CliOverrides | None = None
) -> CompareConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    payload = load_config_file(config_path)
    return merge_config(CompareConfig(), payload, overrides or CliOverrides())
