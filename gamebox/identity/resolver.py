"""Stable identifier policy for gamebox packages."""

from __future__ import annotations

import hashlib
import re
import uuid
from pathlib import Path
from typing import Sequence

from loguru import logger

from gamebox.config import IdentifierConfig
from gamebox.errors import IdentifierResolutionError, InvalidIdentifierError

from .models import Identifier, IdentifierKind

_REVERSE_DNS_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)+$")

# Kinds that are only ever replaced by an explicit assignment.
_STABLE_KINDS = {IdentifierKind.USER_SPECIFIED, IdentifierKind.REVERSE_DNS, IdentifierKind.UUID}


class IdentifierResolver:
    """Derives the identifier of a gamebox from what is stored and what it contains.

    Priority order:

    1. a stored user-specified, reverse-DNS or previously generated UUID
       identifier is returned unchanged;
    2. a gamebox without executables gets a fresh random UUID;
    3. otherwise the identifier is a digest over the digests of every
       executable, taken in the scanner's path-sorted order.

    The resolver does not persist anything itself: callers store the returned
    identifier when it differs from ``stored``.
    """

    def __init__(self, config: IdentifierConfig | None = None) -> None:
        self.config = config or IdentifierConfig()

    def resolve(self, executables: Sequence[Path], stored: Identifier | None = None) -> Identifier:
        if stored is not None and stored.kind in _STABLE_KINDS:
            return stored

        if not executables:
            if stored is not None and stored.kind is IdentifierKind.EXECUTABLE_DIGEST:
                logger.info("Gamebox no longer contains executables; replacing digest identifier with a UUID")
            return Identifier(str(uuid.uuid4()), IdentifierKind.UUID)

        return Identifier(self.digest_executables(executables), IdentifierKind.EXECUTABLE_DIGEST)

    def digest_executables(self, executables: Sequence[Path]) -> str:
        """Digest the concatenated per-file digests of ``executables``."""

        combined = hashlib.new(self.config.digest_algorithm)
        for path in executables:
            combined.update(self._digest_file(Path(path)))
        return combined.hexdigest()

    def assign(self, value: str, kind: IdentifierKind = IdentifierKind.USER_SPECIFIED) -> Identifier:
        """Validate an explicitly assigned identifier."""

        kind = IdentifierKind(kind)
        value = value.strip()
        if not value:
            raise InvalidIdentifierError("Identifier must not be empty")
        if kind not in (IdentifierKind.USER_SPECIFIED, IdentifierKind.REVERSE_DNS):
            raise InvalidIdentifierError(f"Identifiers of kind '{kind.value}' cannot be assigned explicitly")
        if kind is IdentifierKind.REVERSE_DNS and not _REVERSE_DNS_PATTERN.match(value):
            raise InvalidIdentifierError(f"'{value}' is not a reverse-DNS identifier")
        return Identifier(value, kind)

    def _digest_file(self, path: Path) -> bytes:
        digest = hashlib.new(self.config.digest_algorithm)
        try:
            with path.open("rb") as handle:
                while chunk := handle.read(self.config.chunk_size):
                    digest.update(chunk)
        except OSError as exc:
            raise IdentifierResolutionError(f"Cannot read executable {path}: {exc.strerror or exc}") from exc
        return digest.digest()


__all__ = ["IdentifierResolver"]
