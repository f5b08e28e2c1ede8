from __future__ import annotations

import plistlib
from pathlib import Path

import pytest

from gamebox.errors import ErrorCode, MetadataError
from gamebox.identity import IdentifierKind
from gamebox.launchers import Launcher
from gamebox.metadata import GameInfoKey, InMemoryMetadataStore, PlistMetadataStore


def test_plist_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "Game Info.plist"
    store = PlistMetadataStore(path)
    store.set(GameInfoKey.IDENTIFIER, "net.example.game")
    store.set(GameInfoKey.IDENTIFIER_KIND, IdentifierKind.REVERSE_DNS)
    store.set(GameInfoKey.TARGET_PROGRAM, "GAME/PLAY.EXE")
    store.set(GameInfoKey.LAUNCHERS, [Launcher(title="Play", path="GAME/PLAY.EXE", is_default=True)])
    store.set("custom_rating", 5)
    assert store.dirty

    store.save()
    assert not store.dirty

    reopened = PlistMetadataStore(path)
    assert reopened.get(GameInfoKey.IDENTIFIER) == "net.example.game"
    assert reopened.get(GameInfoKey.IDENTIFIER_KIND) is IdentifierKind.REVERSE_DNS
    assert reopened.get(GameInfoKey.TARGET_PROGRAM) == "GAME/PLAY.EXE"
    assert reopened.get(GameInfoKey.LAUNCHERS)[0].title == "Play"
    assert reopened.get("custom_rating") == 5
    assert reopened.get("absent", "fallback") == "fallback"


def test_saved_plist_omits_unset_values(tmp_path: Path) -> None:
    path = tmp_path / "Game Info.plist"
    store = PlistMetadataStore(path)
    store.set(GameInfoKey.CLOSE_ON_EXIT, True)
    store.save()

    with path.open("rb") as handle:
        data = plistlib.load(handle)

    assert data == {"close_on_exit": True, "launchers": []}
    assert not list(tmp_path.glob(".gameinfo-*"))


def test_missing_file_loads_empty_info(tmp_path: Path) -> None:
    store = PlistMetadataStore(tmp_path / "absent.plist")

    assert store.get(GameInfoKey.IDENTIFIER) is None
    assert store.get(GameInfoKey.CLOSE_ON_EXIT) is False
    assert not store.dirty


def test_corrupt_plist_raises(tmp_path: Path) -> None:
    path = tmp_path / "Game Info.plist"
    path.write_bytes(b"not a plist")

    with pytest.raises(MetadataError) as excinfo:
        PlistMetadataStore(path)

    assert excinfo.value.code is ErrorCode.METADATA_INVALID


def test_invalid_values_are_rejected() -> None:
    store = InMemoryMetadataStore()

    with pytest.raises(MetadataError):
        store.set(GameInfoKey.IDENTIFIER_KIND, "made-up")
    with pytest.raises(MetadataError):
        store.set("callback", object())

    assert not store.dirty


def test_none_removes_arbitrary_keys() -> None:
    store = InMemoryMetadataStore({"notes": "keep me"})

    store.set("notes", None)

    assert store.get("notes") is None
    assert "notes" not in store.as_dict()
