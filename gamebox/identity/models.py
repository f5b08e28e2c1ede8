"""Identifier value types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class IdentifierKind(str, Enum):
    """How a gamebox identifier was obtained."""

    USER_SPECIFIED = "user-specified"
    UUID = "uuid"
    EXECUTABLE_DIGEST = "executable-digest"
    REVERSE_DNS = "reverse-dns"


@dataclass(frozen=True, slots=True)
class Identifier:
    value: str
    kind: IdentifierKind

    def __str__(self) -> str:
        return self.value


__all__ = ["Identifier", "IdentifierKind"]
