"""Containment checks for paths that must stay inside a root directory."""

from __future__ import annotations

import os
from pathlib import Path

from gamebox.errors import PathOutsideRootError


def resolve_entry(path: Path) -> Path:
    """Resolve ``path`` without following a symlink in its final component."""

    path = Path(os.path.abspath(path))
    return Path(os.path.realpath(path.parent)) / path.name


def real_path(path: Path | str) -> Path | None:
    """Resolve every symlink in ``path``; ``None`` when the links form a loop.

    Missing components are allowed, as with :meth:`Path.resolve`.
    """

    try:
        return Path(os.path.realpath(path, strict=True))
    except FileNotFoundError:
        return Path(os.path.realpath(path))
    except OSError:
        return None


class PathGuard:
    """Validates that candidate paths remain strict descendants of ``root``.

    Candidates whose symlinks cannot be resolved (loops) are never contained.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    @property
    def resolved_root(self) -> Path:
        return self.root.resolve()

    def _resolve(self, candidate: Path | str, follow_symlinks: bool) -> Path | None:
        candidate = Path(candidate)
        if not candidate.is_absolute():
            candidate = self.root / candidate
        if follow_symlinks:
            return real_path(candidate)
        return resolve_entry(candidate)

    def contains(self, candidate: Path | str, *, follow_symlinks: bool = True) -> bool:
        resolved = self._resolve(candidate, follow_symlinks)
        root = self.resolved_root
        return resolved is not None and resolved != root and resolved.is_relative_to(root)

    def validate(
        self,
        candidate: Path | str,
        *,
        follow_symlinks: bool = True,
    ) -> Path:
        """Return the resolved candidate or raise :class:`PathOutsideRootError`."""

        resolved = self._resolve(candidate, follow_symlinks)
        root = self.resolved_root
        if resolved is None or resolved == root or not resolved.is_relative_to(root):
            raise PathOutsideRootError(Path(candidate), self.root)
        return resolved


__all__ = ["PathGuard", "real_path", "resolve_entry"]
