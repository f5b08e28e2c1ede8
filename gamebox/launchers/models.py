"""Launcher shortcut model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Launcher(BaseModel):
    """A named shortcut to a program inside the gamebox.

    Launchers are immutable; the registry replaces them to change flags.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    title: str = Field(..., description="Display name of the launcher")
    path: str = Field(..., description="Program path relative to the gamebox root")
    arguments: str = Field("", description="Arguments passed to the program at launch")
    is_default: bool = Field(False, description="Whether this launcher runs when the gamebox opens")


__all__ = ["Launcher"]
