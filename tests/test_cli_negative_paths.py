from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from toolver import cli


def _flat(output: str) -> str:
    return " ".join(output.split())


@pytest.fixture(autouse=True)
def asdf_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    data_dir = tmp_path / ".asdf"
    monkeypatch.setenv("ASDF_DATA_DIR", str(data_dir))
    monkeypatch.setenv("ASDF_CONFIG_FILE", str(tmp_path / ".asdfrc"))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for name in ("ASDF_NODEJS_VERSION", "ASDF_IGNORE_PATCH", "ASDF_IGNORE_MINOR", "ASDF_IGNORE_VERSION"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return data_dir


def test_cli_current_unknown_plugin(asdf_env: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli.app, ["current", "nodejs"])

    assert result.exit_code == 1
    assert "not installed" in _flat(result.output)


def test_cli_current_no_version_set(asdf_env: Path) -> None:
    runner = CliRunner()
    (asdf_env / "plugins" / "nodejs").mkdir(parents=True)

    result = runner.invoke(cli.app, ["current", "nodejs"])

    assert result.exit_code == 1
    assert "No version is set" in result.output


def test_cli_current_without_plugins(asdf_env: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli.app, ["current"])

    assert result.exit_code == 0
    assert "No plugins installed" in result.output


def test_cli_current_corrupt_pin_file(tmp_path: Path, asdf_env: Path) -> None:
    runner = CliRunner()
    (asdf_env / "plugins" / "nodejs").mkdir(parents=True)
    (tmp_path / ".tool-versions").write_bytes(b"nodejs \xff\n")

    result = runner.invoke(cli.app, ["current", "nodejs"])

    assert result.exit_code == 1
    assert "Could not read" in _flat(result.output)


def test_cli_which_version_not_installed(tmp_path: Path, asdf_env: Path) -> None:
    runner = CliRunner()
    (asdf_env / "plugins" / "nodejs").mkdir(parents=True)
    (tmp_path / ".tool-versions").write_text("nodejs 18.0.0\n", encoding="utf-8")

    result = runner.invoke(cli.app, ["which", "nodejs"])

    assert result.exit_code == 1
    assert "asdf install nodejs 18.0.0" in _flat(result.output)


def test_cli_match_without_policy(asdf_env: Path) -> None:
    runner = CliRunner()
    (asdf_env / "plugins" / "nodejs").mkdir(parents=True)
    (asdf_env / "installs" / "nodejs" / "14.3.0").mkdir(parents=True)

    result = runner.invoke(cli.app, ["match", "nodejs", "14.3.5"])

    assert result.exit_code == 1
    assert "ASDF_IGNORE_PATCH" in _flat(result.output)
