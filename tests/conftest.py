# --------------------------------------------------------------
# File: conftest.py
# Description: Shared fixtures: isolated working directory, keys and sample trees.
# --------------------------------------------------------------

from pathlib import Path
from typing import Dict, Iterator

import pytest

from fcrypt.config import Config

KEY = "0123456789abcdefghijABCDEFGHIJ_-"
OTHER_KEY = "ZYXWVUTSRQPONMLKJIHGFEDCBA987654"


@pytest.fixture(autouse=True)
def _isolate_cwd(tmp_path, monkeypatch) -> Iterator[None]:
    """Runs every test from an empty working directory so no config.ini leaks in.

    Args:
        tmp_path (Path): Temporary folder provided by pytest.
        monkeypatch (pytest.MonkeyPatch): Fixture used to change directory.
    """
    workdir = tmp_path / "_cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    yield


@pytest.fixture
def key() -> bytes:
    return KEY.encode()


@pytest.fixture
def sample_tree(tmp_path) -> Path:
    """Creates ``a.txt``, ``sub/b.txt`` and an empty ``sub/empty/`` directory.

    Returns:
        Path: Root of the sample tree.
    """
    root = tmp_path / "data"
    (root / "sub" / "empty").mkdir(parents=True)
    (root / "a.txt").write_bytes(b"alpha contents\n")
    (root / "sub" / "b.txt").write_bytes(b"bravo contents\n" * 100)
    return root


def snapshot(root: Path) -> Dict[str, bytes]:
    """Maps every file under ``root`` (relative path) to its bytes."""
    return {str(p.relative_to(root)): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()}


def make_config(target: Path, mode: str = "encrypt", key: bytes = KEY.encode(), **kwargs) -> Config:
    return Config(
        mode=mode,
        target=target,
        target_is_dir=target.is_dir(),
        key=key,
        show_progress=kwargs.pop("show_progress", False),
        **kwargs,
    )
