"""Tests for the helpers command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from gitdown.cli import cli

_EXTRA_PLUGIN_SRC = """\
from gitdown.plugins import hookimpl


class Extra:
    weight = 1

    def compile(self, config, context):
        return ""


class ExtraPlugin:
    @hookimpl
    def register_helpers(self):
        return {"extra": Extra()}
"""


@pytest.fixture(autouse=True)
def _workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)


class TestHelpersCommand:
    def test_lists_builtins(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["helpers"])
        assert result.exit_code == 0, result.output
        for name in ("date", "filesize", "gitinfo", "include"):
            assert name in result.stdout
        assert "count: 4" in result.stdout

    def test_verbose_shows_origin(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-v", "helpers"])
        assert result.exit_code == 0, result.output
        assert "builtins" in result.stdout

    def test_quiet_lists_names(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "helpers"])
        assert result.exit_code == 0, result.output
        assert result.stdout.split() == ["date", "filesize", "gitinfo", "include"]

    def test_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "helpers"])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["data"]["count"] == 4
        assert payload["data"]["items"][-1]["name"] == "include"

    def test_plugins_disabled_by_config(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        plugin_dir = tmp_path / ".gitdown" / "plugins"
        plugin_dir.mkdir(parents=True)
        (plugin_dir / "extra.py").write_text(_EXTRA_PLUGIN_SRC, encoding="utf-8")
        (tmp_path / "gitdown.toml").write_text("[plugins]\nenabled = false\n", encoding="utf-8")

        result = cli_runner.invoke(cli, ["-q", "helpers"])

        assert result.exit_code == 0, result.output
        assert "extra" not in result.stdout.split()

    def test_local_plugin_listed(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        plugin_dir = tmp_path / ".gitdown" / "plugins"
        plugin_dir.mkdir(parents=True)
        (plugin_dir / "extra.py").write_text(_EXTRA_PLUGIN_SRC, encoding="utf-8")

        result = cli_runner.invoke(cli, ["-q", "helpers"])

        assert result.exit_code == 0, result.output
        assert result.stdout.split()[0] == "extra"
