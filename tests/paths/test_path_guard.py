from __future__ import annotations

import os
from pathlib import Path

import pytest

from gamebox.errors import ErrorCode, PathOutsideRootError
from gamebox.paths import PathGuard, real_path, resolve_entry


def test_contains_accepts_descendants(tmp_path: Path) -> None:
    root = tmp_path / "root"
    (root / "sub").mkdir(parents=True)
    guard = PathGuard(root)

    assert guard.contains(root / "sub")
    assert guard.contains(root / "sub" / "not-yet-created.exe")
    assert guard.contains("sub/relative.exe")


def test_contains_rejects_root_and_escapes(tmp_path: Path) -> None:
    root = tmp_path / "root"
    root.mkdir()
    guard = PathGuard(root)

    assert not guard.contains(root)
    assert not guard.contains(root / "sub" / ".." / "..")
    assert not guard.contains("../outside.exe")
    assert not guard.contains(tmp_path / "rootlike")


def test_symlinks_followed_unless_disabled(tmp_path: Path) -> None:
    root = tmp_path / "root"
    root.mkdir()
    outside = tmp_path / "outside.txt"
    outside.write_text("x", encoding="utf-8")
    link = root / "link.txt"
    os.symlink(outside, link)
    guard = PathGuard(root)

    assert not guard.contains(link)
    assert guard.contains(link, follow_symlinks=False)
    assert resolve_entry(link) == root.resolve() / "link.txt"


def test_validate_returns_resolved_path(tmp_path: Path) -> None:
    root = tmp_path / "root"
    (root / "bin").mkdir(parents=True)
    guard = PathGuard(root)

    assert guard.validate("bin/../bin/game.exe") == root.resolve() / "bin" / "game.exe"


def test_validate_raises_with_code(tmp_path: Path) -> None:
    guard = PathGuard(tmp_path / "root")

    with pytest.raises(PathOutsideRootError) as excinfo:
        guard.validate(tmp_path / "elsewhere.exe")

    assert excinfo.value.code is ErrorCode.PATH_OUTSIDE_ROOT
    assert isinstance(excinfo.value, ValueError)
    assert excinfo.value.to_dict()["domain"] == "gamebox"


def test_symlink_loops_are_never_contained(tmp_path: Path) -> None:
    root = tmp_path / "root"
    root.mkdir()
    os.symlink("loop.txt", root / "loop.txt")
    os.symlink("pong.txt", root / "ping.txt")
    os.symlink("ping.txt", root / "pong.txt")
    guard = PathGuard(root)

    assert real_path(root / "loop.txt") is None
    assert real_path(root / "missing" / "game.exe") == root.resolve() / "missing" / "game.exe"
    assert not guard.contains(root / "loop.txt")
    assert not guard.contains("ping.txt")
    assert guard.contains(root / "loop.txt", follow_symlinks=False)
    with pytest.raises(PathOutsideRootError):
        guard.validate(root / "pong.txt")
