from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from gamebox.config import AppConfig, BaseConfig, load_config


class ExampleConfig(BaseConfig):
    data_root: Path
    feature_enabled: bool


def test_load_config_success(tmp_path: Path) -> None:
    sample = tmp_path / "config.toml"
    sample.write_text(
        """
        data_root = "./cache"
        feature_enabled = true
        """.strip(),
        encoding="utf-8",
    )

    cfg = load_config(ExampleConfig, sample)

    assert cfg.data_root == Path("./cache")
    assert cfg.feature_enabled is True


def test_load_config_missing_file(tmp_path: Path) -> None:
    missing = tmp_path / "missing.toml"
    with pytest.raises(FileNotFoundError):
        load_config(ExampleConfig, missing)


def test_load_config_invalid_toml(tmp_path: Path) -> None:
    broken = tmp_path / "broken.toml"
    broken.write_text("logging_level = \n", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid TOML"):
        load_config(AppConfig, broken)


def test_app_config_rejects_unknown_fields(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("[scan]\nunknown = 1\n", encoding="utf-8")

    with pytest.raises(ValidationError, match="Extra inputs are not permitted"):
        load_config(AppConfig, config_path)


def test_app_config_example_file() -> None:
    """The shipped example.toml mirrors the defaults."""
    config_path = Path(__file__).resolve().parents[2] / "config" / "example.toml"
    cfg = load_config(AppConfig, config_path)

    assert cfg.logging_level == "INFO"
    assert cfg.scan.executable_types == [".exe", ".com", ".bat"]
    assert "dosbox*" in cfg.scan.executable_exclusions
    assert cfg.scan.cd_volume_types[:2] == [".cdrom", ".iso"]
    assert cfg.documentation.default_conflict_behaviour == "rename"
    assert cfg.documentation.populate_on_create is True
    assert cfg.identifier.digest_algorithm == "sha1"
    assert cfg == AppConfig()


def test_scan_config_normalises_suffixes() -> None:
    cfg = AppConfig.model_validate({"scan": {"executable_types": ["EXE", ".Com", "exe"]}})

    assert cfg.scan.executable_types == [".exe", ".com"]


def test_scan_config_rejects_overlapping_volume_types() -> None:
    with pytest.raises(ValidationError, match="declared for both"):
        AppConfig.model_validate({"scan": {"cd_volume_types": [".iso", ".img"]}})


def test_identifier_config_rejects_unknown_algorithm() -> None:
    with pytest.raises(ValidationError, match="Unsupported digest algorithm"):
        AppConfig.model_validate({"identifier": {"digest_algorithm": "crc-32"}})


def test_documentation_config_rejects_unknown_keys() -> None:
    with pytest.raises(ValidationError, match="Extra inputs are not permitted"):
        AppConfig.model_validate({"documentation": {"trash_dir": "~/.local/share/Trash"}})
