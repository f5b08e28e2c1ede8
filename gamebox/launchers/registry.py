"""Ordered launcher list with a single-default invariant."""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import contextmanager
from typing import Callable, Iterable, Iterator, overload

from loguru import logger

from gamebox.errors import LauncherIndexError, LauncherNotFoundError
from gamebox.undo import UndoScope, no_undo

from .models import Launcher

ChangeCallback = Callable[[tuple[Launcher, ...]], None]


def _with_default(launcher: Launcher, is_default: bool) -> Launcher:
    return launcher.model_copy(update={"is_default": is_default})


class LauncherRegistry(Sequence[Launcher]):
    """Owns the ordered launchers of one gamebox.

    At most one launcher is flagged as default. Every mutation runs inside the
    undo scope and then reports the new list through ``on_change``.
    """

    def __init__(
        self,
        launchers: Iterable[Launcher] = (),
        *,
        on_change: ChangeCallback | None = None,
        undo_scope: UndoScope | None = None,
    ) -> None:
        self._launchers: list[Launcher] = []
        self._on_change = on_change
        self._undo_scope = undo_scope or no_undo

        seen_default = False
        for launcher in launchers:
            if launcher.is_default:
                if seen_default:
                    logger.warning("Clearing duplicate default flag on launcher '{}'", launcher.title)
                    launcher = _with_default(launcher, False)
                seen_default = True
            self._launchers.append(launcher)

    # ------------------------------------------------------------------
    # Sequence protocol
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._launchers)

    @overload
    def __getitem__(self, index: int) -> Launcher: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Launcher, ...]: ...

    def __getitem__(self, index: int | slice) -> Launcher | tuple[Launcher, ...]:
        if isinstance(index, slice):
            return tuple(self._launchers[index])
        return self._launchers[index]

    def __iter__(self) -> Iterator[Launcher]:
        return iter(tuple(self._launchers))

    @property
    def launchers(self) -> tuple[Launcher, ...]:
        return tuple(self._launchers)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def insert(self, launcher: Launcher, index: int) -> None:
        if index < 0 or index > len(self._launchers):
            raise LauncherIndexError(index, len(self._launchers))

        with self._mutation("Add Launcher"):
            if launcher.is_default:
                self._clear_defaults()
            self._launchers.insert(index, launcher)
        logger.debug("Inserted launcher '{}' at {}", launcher.title, index)

    def append(self, launcher: Launcher) -> None:
        self.insert(launcher, len(self._launchers))

    def add(
        self,
        title: str,
        path: str,
        arguments: str = "",
        *,
        is_default: bool = False,
        index: int | None = None,
    ) -> Launcher:
        """Build a launcher from its fields and insert it (appending by default)."""

        launcher = Launcher(title=title, path=path, arguments=arguments, is_default=is_default)
        self.insert(launcher, len(self._launchers) if index is None else index)
        return launcher

    def remove(self, launcher: Launcher) -> None:
        """Remove the first registered launcher equal to ``launcher``."""

        try:
            index = self._launchers.index(launcher)
        except ValueError:
            raise LauncherNotFoundError(f"Launcher '{launcher.title}' is not registered") from None
        self.remove_at(index)

    def remove_at(self, index: int) -> Launcher:
        if index < 0 or index >= len(self._launchers):
            raise LauncherIndexError(index, len(self._launchers))

        with self._mutation("Remove Launcher"):
            removed = self._launchers.pop(index)
        logger.debug("Removed launcher '{}' from {}", removed.title, index)
        return removed

    # ------------------------------------------------------------------
    # Default launcher
    # ------------------------------------------------------------------
    @property
    def default_launcher(self) -> Launcher | None:
        return next((launcher for launcher in self._launchers if launcher.is_default), None)

    @property
    def default_index(self) -> int | None:
        return next((i for i, launcher in enumerate(self._launchers) if launcher.is_default), None)

    def set_default_index(self, index: int | None) -> None:
        """Make the launcher at ``index`` the only default; ``None`` clears every flag."""

        if index is not None and (index < 0 or index >= len(self._launchers)):
            raise LauncherIndexError(index, len(self._launchers))

        with self._mutation("Change Default Launcher"):
            self._clear_defaults()
            if index is not None:
                self._launchers[index] = _with_default(self._launchers[index], True)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _clear_defaults(self) -> None:
        for index, launcher in enumerate(self._launchers):
            if launcher.is_default:
                self._launchers[index] = _with_default(launcher, False)

    @contextmanager
    def _mutation(self, action: str) -> Iterator[None]:
        with self._undo_scope(action):
            yield
        if self._on_change is not None:
            self._on_change(self.launchers)


__all__ = ["LauncherRegistry", "ChangeCallback"]
