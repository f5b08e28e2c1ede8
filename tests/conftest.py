"""Pytest helpers for path configuration and gamebox fixtures."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable
from urllib.parse import quote

import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from gamebox.documentation import Trash  # noqa: E402

GameboxFactory = Callable[..., Path]


@pytest.fixture
def make_gamebox(tmp_path: Path) -> GameboxFactory:
    """
    Build a gamebox directory tree under ``tmp_path``.

    ``files`` maps relative paths to text (or bytes) content; parent folders
    are created as needed. Entries ending in ``/`` create empty directories.
    """

    def _make(files: dict[str, str | bytes] | None = None, name: str = "Game.boxer") -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        for relative, content in (files or {}).items():
            target = root / relative
            if relative.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture(autouse=True)
def trash_files(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Keep every test away from the user's real trash.

    ``XDG_DATA_HOME`` points into ``tmp_path`` and ``send2trash`` is replaced
    by a double that lays entries out the way it does for the home trash.
    Returns the trash ``files`` directory.
    """

    data_home = tmp_path / "xdg"
    monkeypatch.setenv("XDG_DATA_HOME", str(data_home))
    files_dir = data_home / "Trash" / "files"
    info_dir = data_home / "Trash" / "info"

    def _send2trash(path: str) -> None:
        source = Path(os.path.abspath(path))
        if not os.path.lexists(source):
            raise FileNotFoundError(f"File not found: {source}")
        files_dir.mkdir(parents=True, exist_ok=True)
        info_dir.mkdir(parents=True, exist_ok=True)
        stem, suffix = os.path.splitext(source.name)
        name, counter = source.name, 0
        while os.path.lexists(files_dir / name) or (info_dir / f"{name}.trashinfo").exists():
            counter += 1
            name = f"{stem} {counter}{suffix}"
        (info_dir / f"{name}.trashinfo").write_text(
            f"[Trash Info]\nPath={quote(str(source))}\nDeletionDate=2026-01-01T00:00:00\n",
            encoding="utf-8",
        )
        os.rename(source, files_dir / name)

    monkeypatch.setattr("gamebox.documentation.trash.send2trash", _send2trash)
    return files_dir


@pytest.fixture
def trash() -> Trash:
    return Trash()
