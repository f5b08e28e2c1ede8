"""Undo hook invoked around mutating gamebox operations."""

from __future__ import annotations

from contextlib import AbstractContextManager, nullcontext
from typing import Callable

# Called with a short action name ("Add Launcher", "Set Target Program", ...);
# the returned context manager wraps the mutation.
UndoScope = Callable[[str], AbstractContextManager[None]]


def no_undo(action: str) -> AbstractContextManager[None]:
    return nullcontext()


__all__ = ["UndoScope", "no_undo"]
