"""Data models produced by the resource scanner."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable


class VolumeKind(str, Enum):
    """Emulated drive types that can be bundled inside a gamebox."""

    HDD = "hdd"
    CD = "cd"
    FLOPPY = "floppy"


@dataclass(frozen=True, slots=True)
class ResourceSet:
    """Executables and volumes found by a single scan pass.

    The four sequences are disjoint and sorted by path.
    """

    executables: tuple[Path, ...] = ()
    hdd_volumes: tuple[Path, ...] = ()
    cd_volumes: tuple[Path, ...] = ()
    floppy_volumes: tuple[Path, ...] = ()

    def volumes(self, kind: VolumeKind) -> tuple[Path, ...]:
        if kind is VolumeKind.HDD:
            return self.hdd_volumes
        if kind is VolumeKind.CD:
            return self.cd_volumes
        return self.floppy_volumes

    def volumes_of_types(self, kinds: Iterable[VolumeKind | str]) -> tuple[Path, ...]:
        """Return every volume whose kind is listed in ``kinds``, sorted by path."""

        wanted = {VolumeKind(kind) for kind in kinds}
        return tuple(sorted(path for kind in wanted for path in self.volumes(kind)))


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Outcome of scanning a gamebox tree."""

    root: Path
    resources: ResourceSet
    documentation: tuple[Path, ...] = ()
    skipped: tuple[Path, ...] = ()


__all__ = ["VolumeKind", "ResourceSet", "ScanResult"]
