"""Error domain shared by every gamebox component."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

ERROR_DOMAIN = "gamebox"


class ErrorCode(str, Enum):
    """Codes reported by :class:`GameboxError` instances."""

    TARGET_PATH_OUTSIDE_GAMEBOX = "TargetPathOutsideGamebox"
    PATH_OUTSIDE_ROOT = "PathOutsideRoot"
    INDEX_OUT_OF_RANGE = "IndexOutOfRange"
    LAUNCHER_NOT_FOUND = "LauncherNotFound"
    FOLDER_CREATION_FAILED = "FolderCreationFailed"
    POPULATION_FAILED = "PopulationFailed"
    IMPORT_FAILED = "ImportFailed"
    NOT_IN_DOCUMENTATION_FOLDER = "NotInDocumentationFolder"
    TRASH_FAILED = "TrashFailed"
    INVALID_IDENTIFIER = "InvalidIdentifier"
    IDENTIFIER_RESOLUTION_FAILED = "IdentifierResolutionFailed"
    METADATA_INVALID = "MetadataInvalid"


class GameboxError(Exception):
    """Base class for all errors raised by the gamebox library."""

    domain = ERROR_DOMAIN
    code: ErrorCode

    def to_dict(self) -> dict[str, Any]:
        return {"domain": self.domain, "code": self.code.value, "message": str(self)}


class PathOutsideRootError(GameboxError, ValueError):
    """A candidate path does not stay inside the expected root."""

    code = ErrorCode.PATH_OUTSIDE_ROOT

    def __init__(self, candidate: Path, root: Path) -> None:
        super().__init__(f"{candidate} is not located inside {root}")
        self.candidate = candidate
        self.root = root


class TargetPathOutsideGameboxError(PathOutsideRootError):
    """The requested target program lies outside the gamebox."""

    code = ErrorCode.TARGET_PATH_OUTSIDE_GAMEBOX


class InvalidIdentifierError(GameboxError, ValueError):
    code = ErrorCode.INVALID_IDENTIFIER


class IdentifierResolutionError(GameboxError, OSError):
    code = ErrorCode.IDENTIFIER_RESOLUTION_FAILED


class MetadataError(GameboxError, ValueError):
    code = ErrorCode.METADATA_INVALID


class LauncherIndexError(GameboxError, IndexError):
    code = ErrorCode.INDEX_OUT_OF_RANGE

    def __init__(self, index: int, length: int) -> None:
        super().__init__(f"Launcher index {index} is out of range for {length} launcher(s)")
        self.index = index
        self.length = length


class LauncherNotFoundError(GameboxError, LookupError):
    code = ErrorCode.LAUNCHER_NOT_FOUND


class DocumentationFolderError(GameboxError, OSError):
    """The documentation folder could not be created."""

    code = ErrorCode.FOLDER_CREATION_FAILED


class DocumentationPopulationError(GameboxError, OSError):
    """One or more documentation symlinks could not be created.

    The partial :class:`~gamebox.documentation.PopulationReport` is available
    as :attr:`report`.
    """

    code = ErrorCode.POPULATION_FAILED

    def __init__(self, message: str, *, report: Any) -> None:
        super().__init__(message)
        self.report = report


class DocumentationImportError(GameboxError, OSError):
    code = ErrorCode.IMPORT_FAILED


class NotInDocumentationFolderError(GameboxError, ValueError):
    code = ErrorCode.NOT_IN_DOCUMENTATION_FOLDER


class DocumentationTrashError(GameboxError, OSError):
    code = ErrorCode.TRASH_FAILED


__all__ = [
    "ERROR_DOMAIN",
    "ErrorCode",
    "GameboxError",
    "PathOutsideRootError",
    "TargetPathOutsideGameboxError",
    "InvalidIdentifierError",
    "IdentifierResolutionError",
    "MetadataError",
    "LauncherIndexError",
    "LauncherNotFoundError",
    "DocumentationFolderError",
    "DocumentationPopulationError",
    "DocumentationImportError",
    "NotInDocumentationFolderError",
    "DocumentationTrashError",
]
