"""The gamebox package: one directory bundling a DOS program and its resources.

A :class:`Gamebox` composes the resource scanner, identifier resolver,
launcher registry and documentation synchronizer around a root directory and
a game-info metadata store.

Instances are not thread-safe. Callers must serialise access to one instance,
and two instances opened on the same directory do not coordinate with each
other.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from loguru import logger

from gamebox.config import AppConfig
from gamebox.documentation import DocumentationSynchronizer, Trash
from gamebox.errors import TargetPathOutsideGameboxError
from gamebox.identity import Identifier, IdentifierKind, IdentifierResolver
from gamebox.launchers import Launcher, LauncherRegistry
from gamebox.metadata import GameInfoKey, MetadataStore, PlistMetadataStore
from gamebox.paths import PathGuard
from gamebox.scanner import ResourceScanner, ResourceSet, ScanResult, VolumeKind
from gamebox.undo import UndoScope, no_undo

GAMEBOX_EXTENSION = ".boxer"
CONFIGURATION_FILE_NAME = "DOSBox Preferences.conf"
GAME_INFO_FILE_NAME = "Game Info.plist"


@dataclass(slots=True)
class _Caches:
    scan: ScanResult | None = None
    identifier: Identifier | None = None
    launchers: LauncherRegistry | None = None


class Gamebox:
    """A directory-backed gamebox."""

    def __init__(
        self,
        path: Path,
        *,
        config: AppConfig | None = None,
        store: MetadataStore | None = None,
        undo_scope: UndoScope | None = None,
        trash: Trash | None = None,
    ) -> None:
        self.path = Path(path).absolute()
        self.config = config or AppConfig()
        self.store: MetadataStore = store if store is not None else PlistMetadataStore(self.game_info_path)
        self.undo_scope = undo_scope or no_undo
        self.guard = PathGuard(self.path)
        self.scanner = ResourceScanner(self.config.scan)
        self.resolver = IdentifierResolver(self.config.identifier)
        self.documentation = DocumentationSynchronizer(
            self.path,
            lambda: self.scan.documentation,
            self.config.documentation,
            trash=trash,
        )
        self._caches = _Caches()

    @classmethod
    def open(cls, path: Path, **kwargs: Any) -> "Gamebox":
        """Open an existing gamebox directory."""

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Gamebox not found: {path}")
        if not path.is_dir():
            raise NotADirectoryError(f"Gamebox is not a directory: {path}")
        return cls(path, **kwargs)

    def __repr__(self) -> str:
        return f"Gamebox({str(self.path)!r})"

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    @property
    def name(self) -> str:
        """Display name: the directory name without a ``.boxer`` extension."""

        name = self.path.name
        if name.lower().endswith(GAMEBOX_EXTENSION):
            return name[: -len(GAMEBOX_EXTENSION)]
        return name

    @property
    def configuration_file_path(self) -> Path:
        return self.path / CONFIGURATION_FILE_NAME

    @property
    def configuration_file(self) -> Path | None:
        path = self.configuration_file_path
        return path if path.is_file() else None

    @property
    def game_info_path(self) -> Path:
        return self.path / GAME_INFO_FILE_NAME

    # ------------------------------------------------------------------
    # Caches
    # ------------------------------------------------------------------
    def refresh(self) -> None:
        """Drop cached scan results, identifier and launchers.

        Saved metadata is re-read from the store; unsaved changes are kept.
        """

        self._caches = _Caches()
        if self.store.dirty:
            logger.debug("Keeping unsaved game info for {} across refresh", self.path)
        else:
            self.store.reload()
        logger.debug("Refreshed caches for {}", self.path)

    @property
    def scan(self) -> ScanResult:
        if self._caches.scan is None:
            self._caches.scan = self.scanner.scan(self.path)
        return self._caches.scan

    @property
    def resources(self) -> ResourceSet:
        return self.scan.resources

    @property
    def executables(self) -> tuple[Path, ...]:
        return self.resources.executables

    @property
    def hdd_volumes(self) -> tuple[Path, ...]:
        return self.resources.hdd_volumes

    @property
    def cd_volumes(self) -> tuple[Path, ...]:
        return self.resources.cd_volumes

    @property
    def floppy_volumes(self) -> tuple[Path, ...]:
        return self.resources.floppy_volumes

    def volumes_of_types(self, kinds: Iterable[VolumeKind | str]) -> tuple[Path, ...]:
        return self.resources.volumes_of_types(kinds)

    # ------------------------------------------------------------------
    # Game info
    # ------------------------------------------------------------------
    def get_info(self, key: GameInfoKey | str, default: Any = None) -> Any:
        return self.store.get(key, default)

    def set_info(self, key: GameInfoKey | str, value: Any) -> None:
        self.store.set(key, value)
        if key == GameInfoKey.LAUNCHERS:
            self._caches.launchers = None
        elif key in (GameInfoKey.IDENTIFIER, GameInfoKey.IDENTIFIER_KIND):
            self._caches.identifier = None

    def save(self) -> None:
        """Persist the game info if it changed."""

        if self.store.dirty:
            self.store.save()

    # ------------------------------------------------------------------
    # Identifier
    # ------------------------------------------------------------------
    @property
    def stored_identifier(self) -> Identifier | None:
        value = self.store.get(GameInfoKey.IDENTIFIER)
        kind = self.store.get(GameInfoKey.IDENTIFIER_KIND)
        if not value:
            return None
        return Identifier(value, IdentifierKind(kind) if kind else IdentifierKind.USER_SPECIFIED)

    @property
    def identifier(self) -> Identifier:
        """The gamebox identifier, derived and stored on first access after each refresh."""

        if self._caches.identifier is None:
            stored = self.stored_identifier
            resolved = self.resolver.resolve(self.executables, stored)
            if resolved != stored:
                self._store_identifier(resolved)
                logger.info("Assigned {} identifier {} to {}", resolved.kind.value, resolved.value, self.path)
            self._caches.identifier = resolved
        return self._caches.identifier

    def set_identifier(self, value: str, kind: IdentifierKind | str = IdentifierKind.USER_SPECIFIED) -> Identifier:
        identifier = self.resolver.assign(value, IdentifierKind(kind))
        with self.undo_scope("Change Identifier"):
            self._store_identifier(identifier)
        self._caches.identifier = identifier
        return identifier

    def _store_identifier(self, identifier: Identifier) -> None:
        self.store.set(GameInfoKey.IDENTIFIER, identifier.value)
        self.store.set(GameInfoKey.IDENTIFIER_KIND, identifier.kind)

    # ------------------------------------------------------------------
    # Target program
    # ------------------------------------------------------------------
    def validate_target_path(self, candidate: Path | str) -> Path:
        """Return ``candidate`` relative to the gamebox, or raise if it lies outside."""

        candidate = Path(candidate)
        if not self.guard.contains(candidate):
            raise TargetPathOutsideGameboxError(candidate, self.path)
        resolved = self.guard.validate(candidate)
        return Path(os.path.relpath(resolved, self.guard.resolved_root))

    @property
    def target_path(self) -> Path | None:
        relative = self.store.get(GameInfoKey.TARGET_PROGRAM)
        return self.path / relative if relative else None

    def set_target_path(self, candidate: Path | str | None) -> None:
        relative = None if candidate is None else self.validate_target_path(candidate)
        with self.undo_scope("Change Target Program"):
            self.store.set(GameInfoKey.TARGET_PROGRAM, None if relative is None else relative.as_posix())

    @property
    def close_on_exit(self) -> bool:
        return bool(self.store.get(GameInfoKey.CLOSE_ON_EXIT))

    def set_close_on_exit(self, flag: bool) -> None:
        with self.undo_scope("Change Close On Exit"):
            self.store.set(GameInfoKey.CLOSE_ON_EXIT, bool(flag))

    # ------------------------------------------------------------------
    # Launchers
    # ------------------------------------------------------------------
    @property
    def launchers(self) -> LauncherRegistry:
        if self._caches.launchers is None:
            self._caches.launchers = LauncherRegistry(
                self.store.get(GameInfoKey.LAUNCHERS) or [],
                on_change=self._persist_launchers,
                undo_scope=self.undo_scope,
            )
        return self._caches.launchers

    def _persist_launchers(self, launchers: tuple[Launcher, ...]) -> None:
        self.store.set(GameInfoKey.LAUNCHERS, list(launchers))


__all__ = [
    "Gamebox",
    "GAMEBOX_EXTENSION",
    "CONFIGURATION_FILE_NAME",
    "GAME_INFO_FILE_NAME",
]
