from __future__ import annotations

from contextlib import contextmanager

import pytest
from pydantic import ValidationError

from gamebox.errors import ErrorCode, LauncherIndexError, LauncherNotFoundError
from gamebox.launchers import Launcher, LauncherRegistry


def _launcher(title: str, *, is_default: bool = False) -> Launcher:
    return Launcher(title=title, path=f"{title.upper()}.EXE", is_default=is_default)


def test_new_default_clears_previous_one() -> None:
    registry = LauncherRegistry()

    registry.insert(_launcher("Play", is_default=True), 0)
    registry.insert(_launcher("Setup", is_default=True), 1)

    assert registry.default_launcher is not None
    assert registry.default_launcher.title == "Setup"
    assert registry[0].is_default is False
    assert registry.default_index == 1


def test_insert_rejects_out_of_range_index() -> None:
    registry = LauncherRegistry([_launcher("Play")])

    with pytest.raises(LauncherIndexError) as excinfo:
        registry.insert(_launcher("Setup"), 2)
    with pytest.raises(LauncherIndexError):
        registry.insert(_launcher("Setup"), -1)

    assert excinfo.value.code is ErrorCode.INDEX_OUT_OF_RANGE
    assert isinstance(excinfo.value, IndexError)
    assert len(registry) == 1


def test_add_builds_and_appends() -> None:
    registry = LauncherRegistry()

    first = registry.add("Play", "GAME.EXE")
    registry.add("Setup", "SETUP.EXE", "-config", index=0)

    assert [launcher.title for launcher in registry] == ["Setup", "Play"]
    assert registry[1] is first
    assert registry[0].arguments == "-config"
    assert registry.default_index is None


def test_remove_default_leaves_none() -> None:
    registry = LauncherRegistry([_launcher("Play", is_default=True), _launcher("Setup")])

    removed = registry.remove_at(0)

    assert removed.title == "Play"
    assert registry.default_launcher is None
    assert registry.default_index is None


def test_remove_unknown_launcher_raises() -> None:
    registry = LauncherRegistry([_launcher("Play")])

    with pytest.raises(LauncherNotFoundError) as excinfo:
        registry.remove(_launcher("Missing"))
    with pytest.raises(LauncherIndexError):
        registry.remove_at(1)

    assert excinfo.value.code is ErrorCode.LAUNCHER_NOT_FOUND


def test_set_default_index_keeps_single_default() -> None:
    registry = LauncherRegistry([_launcher("Play"), _launcher("Setup"), _launcher("Editor")])

    registry.set_default_index(2)
    registry.set_default_index(0)

    assert [launcher.is_default for launcher in registry] == [True, False, False]

    registry.set_default_index(None)
    assert registry.default_index is None

    with pytest.raises(LauncherIndexError):
        registry.set_default_index(3)


def test_duplicate_defaults_are_cleared_on_load() -> None:
    registry = LauncherRegistry([_launcher("Play", is_default=True), _launcher("Setup", is_default=True)])

    assert sum(launcher.is_default for launcher in registry) == 1
    assert registry.default_launcher.title == "Play"


def test_mutations_run_in_undo_scope_and_notify() -> None:
    actions: list[str] = []
    snapshots: list[tuple[str, ...]] = []

    @contextmanager
    def undo_scope(action: str):
        actions.append(action)
        yield

    registry = LauncherRegistry(
        on_change=lambda launchers: snapshots.append(tuple(launcher.title for launcher in launchers)),
        undo_scope=undo_scope,
    )

    registry.add("Play", "GAME.EXE")
    registry.add("Setup", "SETUP.EXE")
    registry.set_default_index(1)
    registry.remove_at(0)

    assert actions == ["Add Launcher", "Add Launcher", "Change Default Launcher", "Remove Launcher"]
    assert snapshots == [("Play",), ("Play", "Setup"), ("Play", "Setup"), ("Setup",)]


def test_failed_mutation_does_not_notify() -> None:
    calls: list[object] = []
    registry = LauncherRegistry(on_change=calls.append)

    with pytest.raises(LauncherIndexError):
        registry.remove_at(0)

    assert calls == []


def test_reinserting_default_launcher_keeps_a_default() -> None:
    registry = LauncherRegistry()
    play = _launcher("Play", is_default=True)

    registry.insert(play, 0)
    registry.insert(play, 1)

    assert registry.default_index == 1
    assert [launcher.is_default for launcher in registry] == [False, True]
    assert play.is_default is True


def test_stored_launchers_cannot_be_mutated() -> None:
    registry = LauncherRegistry()
    registry.insert(_launcher("Play", is_default=True), 0)
    setup = registry.add("Setup", "SETUP.EXE")

    with pytest.raises(ValidationError):
        setup.is_default = True

    assert registry.default_index == 0
    assert sum(launcher.is_default for launcher in registry) == 1
