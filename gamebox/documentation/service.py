"""Keeps a gamebox's documentation folder in step with the documentation it contains."""

from __future__ import annotations

import os
import shutil
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Sequence

from loguru import logger

from gamebox.config import DocumentationConfig
from gamebox.errors import (
    DocumentationFolderError,
    DocumentationImportError,
    DocumentationPopulationError,
    DocumentationTrashError,
    GameboxError,
    NotInDocumentationFolderError,
)
from gamebox.paths import PathGuard, real_path, resolve_entry

from .trash import Trash

DOCUMENTATION_FOLDER_NAME = "Documentation"


class ConflictBehaviour(str, Enum):
    """What to do when an imported name is already taken."""

    RENAME = "rename"
    REPLACE = "replace"


@dataclass(slots=True)
class PopulationReport:
    """Outcome of populating the documentation folder."""

    folder: Path | None
    added: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    failures: dict[Path, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


class DocumentationSynchronizer:
    """Manages the documentation mirror folder of one gamebox.

    ``candidates`` returns the documentation discovered by the resource scan;
    the synchronizer reads it but never changes it.
    """

    def __init__(
        self,
        root: Path,
        candidates: Callable[[], Sequence[Path]],
        config: DocumentationConfig | None = None,
        *,
        trash: Trash | None = None,
        folder_name: str = DOCUMENTATION_FOLDER_NAME,
    ) -> None:
        self.root = Path(root)
        self.config = config or DocumentationConfig()
        self.folder_name = folder_name
        self.guard = PathGuard(self.root)
        self._candidates = candidates
        self._trash = trash

    @property
    def folder_path(self) -> Path:
        return self.root / self.folder_name

    @property
    def has_folder(self) -> bool:
        folder = self.folder_path
        return folder.is_dir() and self.guard.contains(folder)

    @property
    def trash_can(self) -> Trash:
        if self._trash is None:
            self._trash = Trash()
        return self._trash

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------
    def candidates(self) -> list[Path]:
        """Discovered documentation that lives outside the documentation folder."""

        folder = real_path(self.folder_path) or resolve_entry(self.folder_path)
        return [path for path in self._candidates() if not resolve_entry(path).is_relative_to(folder)]

    def documentation_urls(self) -> list[Path]:
        """The folder's entries when it exists, otherwise the discovered documentation."""

        folder = self.folder_path
        if self.has_folder:
            return sorted(entry for entry in folder.iterdir() if not entry.name.startswith("."))
        return self.candidates()

    # ------------------------------------------------------------------
    # Folder lifecycle
    # ------------------------------------------------------------------
    def ensure_folder(self, create_if_missing: bool = False, *, populate: bool | None = None) -> Path | None:
        """Return the documentation folder, creating it when asked.

        Returns ``None`` when the folder is absent and ``create_if_missing`` is
        false. A newly created folder is populated with symlinks unless
        ``populate`` (default: ``config.populate_on_create``) is false.
        """

        folder = self.folder_path
        if folder.is_dir():
            if not self.guard.contains(folder):
                raise DocumentationFolderError(
                    f"Documentation folder {folder} resolves outside the gamebox {self.root}"
                )
            return folder
        if not create_if_missing:
            logger.debug("Gamebox {} has no documentation folder", self.root)
            return None

        try:
            folder.mkdir()
        except OSError as exc:
            raise DocumentationFolderError(
                f"Cannot create documentation folder {folder}: {exc.strerror or exc}"
            ) from exc
        logger.info("Created documentation folder {}", folder)

        if populate is None:
            populate = self.config.populate_on_create
        if populate:
            try:
                self.populate()
            except DocumentationPopulationError as exc:
                logger.warning("Documentation folder created but not fully populated: {}", exc)
        return folder

    def populate(self, conflict_behaviour: ConflictBehaviour | str | None = None) -> PopulationReport:
        """Symlink every discovered document into the existing folder.

        Documents that already have a symlink in the folder are skipped, so
        repeated calls are no-ops. Failures are collected per document and
        raised together once all documents were processed.
        """

        folder = self.ensure_folder(create_if_missing=False)
        if folder is None:
            return PopulationReport(folder=None)

        behaviour = self._behaviour(conflict_behaviour)
        report = PopulationReport(folder=folder)
        linked = self._linked_targets(folder)

        for candidate in self.candidates():
            target = real_path(candidate)
            if target is not None and target in linked:
                report.skipped.append(candidate)
                continue
            try:
                destination = self._import(candidate, None, behaviour, symlink=True, folder=folder)
            except DocumentationImportError as exc:
                logger.warning("Could not link {} into {}: {}", candidate, folder, exc)
                report.failures[candidate] = str(exc)
                continue
            linked.add(target)
            report.added.append(destination)

        if report.failures:
            raise DocumentationPopulationError(
                f"{len(report.failures)} of {len(report.failures) + len(report.added)} "
                f"documentation link(s) could not be created in {folder}",
                report=report,
            )
        if report.added:
            logger.info("Linked {} documentation file(s) into {}", len(report.added), folder)
        return report

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------
    def import_file(
        self,
        source: Path,
        title: str | None = None,
        conflict_behaviour: ConflictBehaviour | str | None = None,
    ) -> Path:
        """Copy ``source`` into the folder and return the copy's path."""

        folder = self._require_folder()
        return self._import(source, title, self._behaviour(conflict_behaviour), symlink=False, folder=folder)

    def import_symlink(
        self,
        source: Path,
        title: str | None = None,
        conflict_behaviour: ConflictBehaviour | str | None = None,
    ) -> Path:
        """Link ``source`` into the folder and return the link's path."""

        folder = self._require_folder()
        return self._import(source, title, self._behaviour(conflict_behaviour), symlink=True, folder=folder)

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------
    def can_trash(self, url: Path) -> bool:
        return self._trash_rejection(url) is None

    def trash(self, url: Path) -> Path | None:
        """Move a documentation entry to the trash.

        Returns the entry's location inside the trash, or ``None`` when the
        platform does not expose it.
        """

        rejection = self._trash_rejection(url)
        if rejection is not None:
            raise rejection
        entry = self._folder_entry(url)
        try:
            return self.trash_can.move(entry)
        except OSError as exc:
            raise DocumentationTrashError(f"Cannot move {entry} to the trash: {exc.strerror or exc}") from exc

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _behaviour(self, value: ConflictBehaviour | str | None) -> ConflictBehaviour:
        if value is None:
            value = self.config.default_conflict_behaviour
        return ConflictBehaviour(value)

    def _require_folder(self) -> Path:
        folder = self.ensure_folder(create_if_missing=True)
        assert folder is not None  # created above or raised
        return folder

    def _folder_entry(self, url: Path) -> Path:
        entry = Path(url)
        return entry if entry.is_absolute() else self.folder_path / entry

    def _trash_rejection(self, url: Path) -> GameboxError | None:
        folder = self.folder_path
        entry = self._folder_entry(url)
        if not self.has_folder or not PathGuard(folder).contains(entry, follow_symlinks=False):
            return NotInDocumentationFolderError(f"{url} is not inside the documentation folder {folder}")
        if not os.path.lexists(entry):
            return DocumentationTrashError(f"{url} does not exist")
        if not self.guard.contains(entry):
            return NotInDocumentationFolderError(f"{url} resolves to a location outside the gamebox {self.root}")
        return None

    def _linked_targets(self, folder: Path) -> set[Path]:
        targets = (real_path(entry) for entry in folder.iterdir() if entry.is_symlink())
        return {target for target in targets if target is not None}

    def _destination_name(self, source: Path, title: str | None) -> str:
        if title is None:
            return source.name
        name = title.strip()
        if not name or name in {".", ".."} or "/" in name or os.sep in name or "\0" in name:
            raise DocumentationImportError(f"Invalid documentation title {title!r}")
        if source.suffix and not name.lower().endswith(source.suffix.lower()):
            name += source.suffix
        return name

    def _unique_destination(self, destination: Path) -> Path:
        stem, suffix = os.path.splitext(destination.name)
        counter = 1
        while True:
            candidate = destination.with_name(f"{stem}-{counter}{suffix}")
            if not os.path.lexists(candidate):
                return candidate
            counter += 1

    def _link_target(self, source: Path, folder: Path) -> str:
        real = source.resolve()
        if self.guard.contains(real):
            return os.path.relpath(real, folder.resolve())
        return str(real)

    def _import(
        self,
        source: Path,
        title: str | None,
        behaviour: ConflictBehaviour,
        *,
        symlink: bool,
        folder: Path,
    ) -> Path:
        source = Path(os.path.abspath(source))
        if not source.exists():
            raise DocumentationImportError(f"Documentation source {source} does not exist")

        destination = folder / self._destination_name(source, title)
        if not PathGuard(folder).contains(destination, follow_symlinks=False):
            raise DocumentationImportError(f"{destination} would be placed outside {folder}")

        if os.path.lexists(destination):
            if behaviour is ConflictBehaviour.RENAME:
                destination = self._unique_destination(destination)
            elif resolve_entry(destination) == resolve_entry(source):
                logger.debug("{} is already in place", destination)
                return destination

        staging = Path(tempfile.mkdtemp(prefix=".import-", dir=folder))
        try:
            staged = staging / "item"
            if symlink:
                os.symlink(self._link_target(source, folder), staged)
            elif source.is_dir():
                shutil.copytree(source, staged, symlinks=True)
            else:
                shutil.copy2(source, staged)
            self._commit(staged, destination, staging / "previous")
        except OSError as exc:
            raise DocumentationImportError(f"Cannot import {source} into {folder}: {exc.strerror or exc}") from exc
        finally:
            shutil.rmtree(staging, ignore_errors=True)

        logger.info("Imported {} as {}", source, destination)
        return destination

    @staticmethod
    def _commit(staged: Path, destination: Path, backup: Path) -> None:
        """Move ``staged`` to ``destination``, restoring any previous entry on failure."""

        replaced = os.path.lexists(destination)
        if replaced:
            os.replace(destination, backup)
        try:
            os.replace(staged, destination)
        except OSError:
            if replaced:
                os.replace(backup, destination)
            raise


__all__ = [
    "DOCUMENTATION_FOLDER_NAME",
    "ConflictBehaviour",
    "DocumentationSynchronizer",
    "PopulationReport",
]
