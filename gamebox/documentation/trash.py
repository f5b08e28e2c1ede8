"""Recoverable deletion through the desktop trash."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Iterator
from urllib.parse import unquote

from loguru import logger
from send2trash import send2trash

_INFO_SUFFIX = ".trashinfo"


class Trash:
    """Moves entries to the platform trash with ``send2trash``.

    On freedesktop.org systems the new location is looked up afterwards in
    the home trash and the per-volume ``.Trash-$uid`` / ``.Trash/$uid``
    directories. Other platforms keep their trash private, so the location is
    reported as ``None``.
    """

    def move(self, path: Path) -> Path | None:
        """Move ``path`` into the trash and return its new location when known.

        Symlinks are moved as links; their targets are left untouched.
        """

        path = Path(os.path.abspath(path))
        before = set(self._entries_from(path))
        send2trash(os.fspath(path))
        added = [entry for entry in self._entries_from(path) if entry not in before]
        location = self._newest(added)
        if location is None:
            logger.info("Moved {} to the trash", path)
        else:
            logger.info("Moved {} to the trash at {}", path, location)
        return location

    def locate(self, original: Path) -> Path | None:
        """Return the most recently trashed entry that came from ``original``."""

        return self._newest(list(self._entries_from(Path(os.path.abspath(original)))))

    def _entries_from(self, original: Path) -> Iterator[tuple[Path, Path]]:
        # Yields (info file, trashed entry) pairs recorded for ``original``.
        for trash_dir, topdir in self._candidate_dirs(original):
            info_dir = trash_dir / "info"
            if not info_dir.is_dir():
                continue
            for info_path in info_dir.glob(f"*{_INFO_SUFFIX}"):
                if self._recorded_path(info_path, topdir) == original:
                    yield info_path, trash_dir / "files" / info_path.name.removesuffix(_INFO_SUFFIX)

    @staticmethod
    def _newest(entries: list[tuple[Path, Path]]) -> Path | None:
        if not entries:
            return None
        _, location = max(entries, key=lambda entry: (entry[0].stat().st_mtime_ns, entry[0].name))
        return location

    @staticmethod
    def _recorded_path(info_path: Path, topdir: Path) -> Path | None:
        try:
            lines = info_path.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError):
            return None
        for line in lines:
            if line.startswith("Path="):
                recorded = Path(unquote(line[len("Path=") :]))
                return recorded if recorded.is_absolute() else topdir / recorded
        return None

    def _candidate_dirs(self, original: Path) -> Iterator[tuple[Path, Path]]:
        if sys.platform in ("darwin", "win32"):
            return
        data_home = Path(os.environ.get("XDG_DATA_HOME") or "~/.local/share").expanduser()
        yield data_home / "Trash", data_home

        topdir = _mount_point(original.parent)
        uid = os.getuid()
        yield topdir / ".Trash" / str(uid), topdir
        yield topdir / f".Trash-{uid}", topdir


def _mount_point(path: Path) -> Path:
    path = Path(os.path.realpath(path))
    while not os.path.ismount(path) and path.parent != path:
        path = path.parent
    return path


__all__ = ["Trash"]
