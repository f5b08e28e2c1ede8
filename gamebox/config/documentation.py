"""Documentation folder configuration models."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from gamebox.config.base import BaseConfig


class DocumentationConfig(BaseConfig):
    """Settings for the documentation mirror folder."""

    default_conflict_behaviour: Literal["rename", "replace"] = Field(
        "rename",
        description="How name collisions are resolved when importing documentation",
    )
    populate_on_create: bool = Field(
        True,
        description="Fill a newly created documentation folder with symlinks to discovered documentation",
    )


__all__ = ["DocumentationConfig"]
