import json

from gamebox.cli import main


def test_config_check_json_success(capsys, tmp_path):
    config_text = """
logging_level = "DEBUG"

[scan]
executable_types = [".exe", ".com"]

[documentation]
default_conflict_behaviour = "replace"
"""
    config_file = tmp_path / "config.toml"
    config_file.write_text(config_text)

    exit_code = main(["--config", str(config_file), "config", "check", "--format", "json"])

    assert exit_code == 0

    captured = capsys.readouterr()
    payload = json.loads(captured.out)
    assert payload["status"] == "ok"
    assert payload["warnings"] == []
    assert payload["config_path"].endswith("config.toml")


def test_config_check_reports_warnings(capsys, tmp_path):
    config_file = tmp_path / "config.toml"
    config_file.write_text('[scan]\nexecutable_types = [".exe", ".txt"]\n')

    exit_code = main(["--config", str(config_file), "config", "check", "--format", "json"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert len(payload["warnings"]) == 1
    assert ".txt" in payload["warnings"][0]


def test_config_check_missing_file(capsys, tmp_path):
    missing_path = tmp_path / "absent.toml"

    exit_code = main(["--config", str(missing_path), "config", "check"])

    assert exit_code == 2

    captured = capsys.readouterr()
    assert "Configuration error (missing_file" in captured.err
    assert str(missing_path) in captured.err


def test_config_check_validation_error(capsys, tmp_path):
    config_file = tmp_path / "config.toml"
    config_file.write_text("unknown_field = 42\n")

    exit_code = main(["--config", str(config_file), "config", "check"])

    assert exit_code == 3

    captured = capsys.readouterr()
    assert "validation_error" in captured.err
    assert "Extra inputs are not permitted" in captured.err


def test_config_explain_text_output(capsys):
    exit_code = main(["config", "explain"])

    assert exit_code == 0

    captured = capsys.readouterr()
    assert "Configuration schema" in captured.err
    assert "scan.executable_exclusions" in captured.err
    assert "documentation.populate_on_create" in captured.err
