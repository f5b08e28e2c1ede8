"""Typed game-info mapping stored inside every gamebox."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from gamebox.identity.models import IdentifierKind
from gamebox.launchers.models import Launcher


class GameInfoKey(str, Enum):
    """Keys of the game-info mapping that the library understands."""

    IDENTIFIER = "identifier"
    IDENTIFIER_KIND = "identifier_kind"
    TARGET_PROGRAM = "target_program"
    CLOSE_ON_EXIT = "close_on_exit"
    LAUNCHERS = "launchers"


class GameInfo(BaseModel):
    """Recognised game-info keys; any other key is kept as an extra."""

    model_config = ConfigDict(extra="allow", validate_assignment=True)

    identifier: str | None = Field(None, description="Identifier string of the gamebox")
    identifier_kind: IdentifierKind | None = Field(None, description="How the identifier was obtained")
    target_program: str | None = Field(None, description="Default program, relative to the gamebox root")
    close_on_exit: bool = Field(False, description="Quit the emulator when the target program exits")
    launchers: list[Launcher] = Field(default_factory=list, description="Launcher shortcuts in display order")


__all__ = ["GameInfo", "GameInfoKey"]
