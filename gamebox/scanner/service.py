"""Walks a gamebox tree and classifies the files it contains."""

from __future__ import annotations

import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Sequence

from loguru import logger

from gamebox.config import ScanConfig
from gamebox.paths import PathGuard, real_path

from .models import ResourceSet, ScanResult, VolumeKind


def matches_any(name: str, patterns: Sequence[str]) -> bool:
    """Case-insensitive filename glob match against any of ``patterns``."""

    candidate = name.lower()
    return any(fnmatchcase(candidate, pattern.lower()) for pattern in patterns)


class ResourceScanner:
    """Classifies executables, drive volumes and documentation inside a gamebox.

    Hidden entries (leading ``.``) are ignored. Directory symlinks are never
    descended, and file symlinks are only classified when they resolve to a
    location inside the scanned root.
    """

    def __init__(self, config: ScanConfig | None = None) -> None:
        self.config = config or ScanConfig()
        self._volume_suffixes: dict[str, VolumeKind] = {}
        for kind, suffixes in (
            (VolumeKind.HDD, self.config.hdd_volume_types),
            (VolumeKind.CD, self.config.cd_volume_types),
            (VolumeKind.FLOPPY, self.config.floppy_volume_types),
        ):
            for suffix in suffixes:
                self._volume_suffixes[suffix] = kind

    # ------------------------------------------------------------------
    # Classification predicates
    # ------------------------------------------------------------------
    def volume_kind(self, path: Path | str) -> VolumeKind | None:
        return self._volume_suffixes.get(Path(path).suffix.lower())

    def is_executable(self, path: Path | str, exclusions: Sequence[str] | None = None) -> bool:
        name = Path(path).name
        if Path(name).suffix.lower() not in self.config.executable_types:
            return False
        if exclusions is None:
            exclusions = self.config.executable_exclusions
        return not matches_any(name, exclusions)

    def is_documentation(self, path: Path | str, exclusions: Sequence[str] | None = None) -> bool:
        """Return whether ``path`` looks like documentation, judging by its name."""

        name = Path(path).name
        if name.startswith("."):
            return False
        recognised = Path(name).suffix.lower() in self.config.documentation_types or matches_any(
            name, self.config.documentation_name_patterns
        )
        if not recognised:
            return False
        if exclusions is None:
            exclusions = self.config.documentation_exclusions
        return not matches_any(name, exclusions)

    def _is_document_bundle(self, name: str, exclusions: Sequence[str]) -> bool:
        # Directories such as .rtfd bundles count as one document; name patterns do not apply.
        return Path(name).suffix.lower() in self.config.documentation_types and self.is_documentation(
            name, exclusions
        )

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------
    def scan(
        self,
        root: Path,
        executable_exclusions: Sequence[str] | None = None,
        documentation_exclusions: Sequence[str] | None = None,
    ) -> ScanResult:
        root = Path(root).resolve()
        guard = PathGuard(root)
        if executable_exclusions is None:
            executable_exclusions = self.config.executable_exclusions
        if documentation_exclusions is None:
            documentation_exclusions = self.config.documentation_exclusions

        executables: dict[Path, Path] = {}
        volumes: dict[VolumeKind, list[Path]] = {kind: [] for kind in VolumeKind}
        documentation: list[Path] = []
        skipped: list[Path] = []

        def _on_error(exc: OSError) -> None:
            logger.warning("Cannot read {} while scanning {}: {}", exc.filename, root, exc.strerror)
            if exc.filename:
                skipped.append(Path(exc.filename))

        for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error, followlinks=False):
            current = Path(dirpath)
            dirnames[:] = sorted(name for name in dirnames if not name.startswith("."))

            for name in list(dirnames):
                path = current / name
                if path.is_symlink() and not guard.contains(path):
                    logger.debug("Ignoring directory symlink leading outside the gamebox: {}", path)
                    continue
                kind = self.volume_kind(name)
                if kind is not None:
                    volumes[kind].append(path)
                if self._is_document_bundle(name, documentation_exclusions):
                    documentation.append(path)
                    dirnames.remove(name)

            for name in sorted(filenames):
                if name.startswith("."):
                    continue
                path = current / name
                if path.is_symlink():
                    real = real_path(path)
                    if real is None:
                        logger.warning("Cannot resolve symlink loop {} while scanning {}", path, root)
                        skipped.append(path)
                        continue
                else:
                    real = path
                if real is not path:
                    if not real.exists() or not guard.contains(real):
                        logger.debug("Ignoring symlink that is broken or leads outside the gamebox: {}", path)
                        continue

                kind = self.volume_kind(name)
                if kind is not None:
                    volumes[kind].append(path)
                elif self.is_executable(name, executable_exclusions):
                    known = executables.get(real)
                    executables[real] = path if known is None else min(known, path)
                if self.is_documentation(name, documentation_exclusions):
                    documentation.append(path)

        resources = ResourceSet(
            executables=tuple(sorted(executables.values())),
            hdd_volumes=tuple(sorted(volumes[VolumeKind.HDD])),
            cd_volumes=tuple(sorted(volumes[VolumeKind.CD])),
            floppy_volumes=tuple(sorted(volumes[VolumeKind.FLOPPY])),
        )
        logger.debug(
            "Scanned {}: {} executable(s), {} volume(s), {} documentation file(s)",
            root,
            len(resources.executables),
            len(resources.hdd_volumes) + len(resources.cd_volumes) + len(resources.floppy_volumes),
            len(documentation),
        )
        return ScanResult(
            root=root,
            resources=resources,
            documentation=tuple(sorted(documentation)),
            skipped=tuple(skipped),
        )


__all__ = ["ResourceScanner", "matches_any"]
