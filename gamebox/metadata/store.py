"""Key-value stores holding a gamebox's game info."""

from __future__ import annotations

import os
import plistlib
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Protocol
from xml.parsers.expat import ExpatError

from loguru import logger
from pydantic import ValidationError

from gamebox.errors import MetadataError

from .models import GameInfo, GameInfoKey

_PLIST_SCALARS = (str, bool, int, float, bytes, datetime)


class MetadataStore(Protocol):
    """Capability the gamebox needs from a metadata backend."""

    dirty: bool

    def get(self, key: GameInfoKey | str, default: Any = None) -> Any: ...

    def set(self, key: GameInfoKey | str, value: Any) -> None: ...

    def save(self) -> None: ...

    def reload(self) -> None: ...


def _key_name(key: GameInfoKey | str) -> str:
    return key.value if isinstance(key, GameInfoKey) else str(key)


def _check_plist_value(key: str, value: Any) -> None:
    if isinstance(value, _PLIST_SCALARS):
        return
    if isinstance(value, (list, tuple)):
        for item in value:
            _check_plist_value(key, item)
        return
    if isinstance(value, Mapping):
        for name, item in value.items():
            if not isinstance(name, str):
                raise MetadataError(f"Game info key '{key}' contains a non-string mapping key {name!r}")
            _check_plist_value(key, item)
        return
    raise MetadataError(f"Game info key '{key}' cannot store values of type {type(value).__name__}")


class InMemoryMetadataStore:
    """Game info kept in memory; ``save`` only clears the dirty flag."""

    def __init__(self, info: GameInfo | Mapping[str, Any] | None = None) -> None:
        self._info = self._coerce(info)
        self.dirty = False

    @property
    def info(self) -> GameInfo:
        return self._info

    def get(self, key: GameInfoKey | str, default: Any = None) -> Any:
        name = _key_name(key)
        if name in GameInfo.model_fields:
            return getattr(self._info, name)
        return (self._info.model_extra or {}).get(name, default)

    def set(self, key: GameInfoKey | str, value: Any) -> None:
        name = _key_name(key)
        if name in GameInfo.model_fields:
            try:
                setattr(self._info, name, value)
            except ValidationError as exc:
                raise MetadataError(f"Invalid value for game info key '{name}': {exc.errors()[0]['msg']}") from exc
        else:
            extra = self._info.model_extra
            assert extra is not None  # GameInfo allows extras
            if value is None:
                extra.pop(name, None)
            else:
                _check_plist_value(name, value)
                extra[name] = value
        self.dirty = True

    def as_dict(self) -> dict[str, Any]:
        return self._info.model_dump(exclude_none=True)

    def save(self) -> None:
        self.dirty = False

    def reload(self) -> None:
        """Nothing to reload for an in-memory store."""

    @staticmethod
    def _coerce(info: GameInfo | Mapping[str, Any] | None) -> GameInfo:
        if info is None:
            return GameInfo()
        if isinstance(info, GameInfo):
            return info.model_copy(deep=True)
        try:
            return GameInfo.model_validate(dict(info))
        except ValidationError as exc:
            raise MetadataError(f"Invalid game info: {exc}") from exc


class PlistMetadataStore(InMemoryMetadataStore):
    """Game info persisted as an XML property list."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__()
        self.reload()

    def reload(self) -> None:
        if not self.path.exists():
            self._info = GameInfo()
            self.dirty = False
            return

        try:
            with self.path.open("rb") as handle:
                data = plistlib.load(handle)
        except (plistlib.InvalidFileException, ExpatError, ValueError) as exc:
            raise MetadataError(f"Cannot parse game info at {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise MetadataError(f"Game info at {self.path} is not a dictionary")

        self._info = self._coerce(data)
        self.dirty = False
        logger.debug("Loaded game info from {}", self.path)

    def save(self) -> None:
        payload = self.as_dict()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".gameinfo-", dir=self.path.parent)
        try:
            with os.fdopen(fd, "wb") as handle:
                plistlib.dump(payload, handle, fmt=plistlib.FMT_XML, sort_keys=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        self.dirty = False
        logger.info("Saved game info to {}", self.path)


__all__ = ["MetadataStore", "InMemoryMetadataStore", "PlistMetadataStore"]
