"""
Functional tests for the command line interface.
"""

from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest
from click.testing import CliRunner

from bindable_codegen.bindable_codegen import bindable_codegen

TEST_DATA_DIR = Path(__file__).with_name("test_data") / "declarations"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def declarations(tmp_path) -> Path:
    path = tmp_path / "game.json"
    shutil.copy(TEST_DATA_DIR / "game.json", path)
    return path


def test_generates_cs(runner, declarations, tmp_path):
    out = tmp_path / "out"
    result = runner.invoke(bindable_codegen, [str(declarations), str(out)])

    assert result.exit_code == 0, result.output
    assert "Generated 5 file(s)" in result.output
    assert (out / "Game.Player.g.cs").exists()
    # Diagnostics
    assert "warning BG002 [Game.Plain]" in result.output

    code = (out / "Game.Player.g.cs").read_text(encoding="utf-8")
    assert "// Generated by bindable_codegen v" in code
    assert "bindable_codegen game.json " in code


def test_generates_python(runner, declarations, tmp_path):
    out = tmp_path / "out"
    result = runner.invoke(bindable_codegen, ["--language", "python", str(declarations), str(out)])

    assert result.exit_code == 0, result.output
    assert "Generated 1 file(s)" in result.output
    assert "class PlayerBindable" in (out / "bindings.py").read_text(encoding="utf-8")


def test_config_file(runner, declarations, tmp_path):
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"python_module_name": "game_bindings", "ignore_types": ["Game.Item"]}))
    out = tmp_path / "out"

    result = runner.invoke(bindable_codegen, ["-c", str(config), "-l", "python", str(declarations), str(out)])

    assert result.exit_code == 0, result.output
    code = (out / "game_bindings.py").read_text(encoding="utf-8")
    assert "class ItemBindable" not in code


def test_invalid_config(runner, declarations, tmp_path):
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"log_format": "xml"}))

    result = runner.invoke(bindable_codegen, ["-c", str(config), str(declarations), str(tmp_path / "out")])

    assert result.exit_code == 1
    assert "Error: Invalid value for 'log_format'" in result.output


@pytest.mark.parametrize(
    "content,message",
    [
        ("{not json", "Error: Configuration is not valid JSON"),
        ('["python"]', "Error: Configuration must be a JSON object"),
        (json.dumps({"formatter": {"enabled": True, "indent": 2}}), "Error: Invalid value for 'formatter': unknown key(s) indent"),
    ],
)
def test_malformed_config(runner, declarations, tmp_path, content, message):
    config = tmp_path / "config.json"
    config.write_text(content)

    result = runner.invoke(bindable_codegen, ["-c", str(config), str(declarations), str(tmp_path / "out")])

    assert result.exit_code == 1
    assert message in result.output
    assert not isinstance(result.exception, (ValueError, TypeError))


def test_invalid_declarations(runner, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text('{"types": [{"name": "1bad"}]}')

    result = runner.invoke(bindable_codegen, [str(path), str(tmp_path / "out")])

    assert result.exit_code == 1
    assert "Error: Invalid declaration at types[0].name" in result.output


def test_declarations_not_json(runner, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")

    result = runner.invoke(bindable_codegen, [str(path), str(tmp_path / "out")])

    assert result.exit_code == 1
    assert "not valid JSON" in result.output


def test_existing_output_requires_force(runner, declarations, tmp_path):
    out = tmp_path / "out"
    assert runner.invoke(bindable_codegen, [str(declarations), str(out)]).exit_code == 0

    again = runner.invoke(bindable_codegen, [str(declarations), str(out)])
    assert again.exit_code == 1
    assert "already exists" in again.output

    forced = runner.invoke(bindable_codegen, ["--force", str(declarations), str(out)])
    assert forced.exit_code == 0, forced.output


def test_missing_input(runner, tmp_path):
    result = runner.invoke(bindable_codegen, [str(tmp_path / "missing.json"), str(tmp_path / "out")])

    assert result.exit_code == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
