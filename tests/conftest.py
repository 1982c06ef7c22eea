from __future__ import annotations

import logging
from pathlib import Path

import pytest


def write_tree(root: Path, files: dict[str, str | bytes]) -> Path:
    """Create files (and parent directories) under root."""
    root.mkdir(parents=True, exist_ok=True)
    for relative, content in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def make_tree(tmp_path: Path):
    def _make(name: str, files: dict[str, str | bytes]) -> Path:
        return write_tree(tmp_path / name, files)

    return _make


@pytest.fixture
def case_sensitive_fs(tmp_path: Path) -> bool:
    probe = tmp_path / "case-probe"
    probe.mkdir()
    (probe / "A").write_text("upper", encoding="utf-8")
    (probe / "a").write_text("lower", encoding="utf-8")
    sensitive = len(list(probe.iterdir())) == 2
    if not sensitive:
        pytest.skip("filesystem is case-insensitive")
    return sensitive


@pytest.fixture(autouse=True)
def _reset_dirdrift_logger():
    yield
    logger = logging.getLogger("dirdrift")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
