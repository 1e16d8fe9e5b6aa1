"""Tests for CLI runner."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from nxkit.cli import main
from nxkit.cli.arguments import build_parser
from nxkit.cli.exit_codes import (
    EXIT_INVALID_USAGE,
    EXIT_ISSUES_FOUND,
    EXIT_RESOLUTION_ERROR,
    EXIT_SUCCESS,
)
from nxkit.cli.runner import CLIRunner, get_version
from tests.conftest import make_workspace, write_file, write_json

CSPROJ_PLUGIN = """
project_file_patterns = ["*.csproj"]


def register_project_targets(project_file):
    return {"build": {"executor": "dotnet:build", "options": {"project": project_file}}}
"""


@pytest.fixture
def dotnet_workspace(tmp_path: Path) -> Path:
    """Workspace with one installed-style plugin under tools/."""
    root = make_workspace(
        tmp_path / "repo",
        projects={
            "api": {"root": "apps/api", "targets": {"lint": {"executor": "dotnet:format"}}},
            "libA": {"root": "libs/a"},
        },
        aliases={"@ws/a": ["libs/a/src/index.ts"]},
        plugins=["csproj_plugin"],
    )
    write_file(root / ".nxkit.yml", "plugins:\n  search_paths: [tools]\n")
    write_file(root / "tools/csproj_plugin.py", CSPROJ_PLUGIN)
    write_file(root / "apps/api/Api.csproj")
    return root


class TestGetVersion:
    """Tests for get_version function."""

    def test_get_version_from_metadata(self) -> None:
        with patch("nxkit.cli.runner.version", return_value="1.2.3"):
            assert get_version() == "1.2.3"

    def test_get_version_fallback(self) -> None:
        from importlib.metadata import PackageNotFoundError

        from nxkit import __version__

        with patch("nxkit.cli.runner.version", side_effect=PackageNotFoundError("nxkit")):
            assert get_version() == __version__


class TestBuildParser:
    """Tests for argument parsing."""

    def test_global_flags(self) -> None:
        args = build_parser().parse_args(["--debug", "-v", "plugins"])

        assert args.debug
        assert args.verbose
        assert args.command == "plugins"
        assert args.path == "."

    def test_targets_arguments(self) -> None:
        args = build_parser().parse_args(["targets", "api", "/repo", "--config", "c.yml"])

        assert args.project == "api"
        assert args.path == "/repo"
        assert args.config == Path("c.yml")

    def test_resolve_arguments(self) -> None:
        args = build_parser().parse_args(["resolve", "@ws/a"])

        assert args.identifier == "@ws/a"


class TestCLIRunner:
    """Tests for CLIRunner class."""

    def test_initialization(self) -> None:
        runner = CLIRunner()

        assert runner.parser is not None
        assert set(runner.commands) == {"plugins", "targets", "resolve", "validate"}

    def test_run_help(self, capsys) -> None:
        result = CLIRunner().run(["--help"])

        assert result == EXIT_SUCCESS
        assert "usage:" in capsys.readouterr().out.lower()

    def test_run_short_help(self, capsys) -> None:
        result = CLIRunner().run(["-h"])

        assert result == EXIT_SUCCESS
        assert "usage:" in capsys.readouterr().out.lower()

    def test_run_version(self, capsys) -> None:
        result = CLIRunner().run(["--version"])

        assert result == EXIT_SUCCESS
        assert capsys.readouterr().out.strip()

    def test_run_no_command(self, capsys) -> None:
        result = CLIRunner().run([])

        assert result == EXIT_SUCCESS
        assert "usage:" in capsys.readouterr().out.lower()

    def test_main_delegates_to_runner(self, capsys) -> None:
        assert main(["--version"]) == EXIT_SUCCESS


class TestPluginsCommand:
    """Tests for `nxkit plugins`."""

    def test_lists_plugins(self, dotnet_workspace: Path, capsys) -> None:
        result = CLIRunner().run(["plugins", str(dotnet_workspace)])

        out = capsys.readouterr().out
        assert result == EXIT_SUCCESS
        assert "csproj_plugin.py" in out
        assert "Identifier: csproj_plugin" in out
        assert "Project files: *.csproj" in out
        assert "Capabilities: project_file_patterns, register_project_targets" in out

    def test_no_plugins_declared(self, tmp_path: Path, capsys) -> None:
        make_workspace(tmp_path, projects={})

        result = CLIRunner().run(["plugins", str(tmp_path)])

        assert result == EXIT_SUCCESS
        assert "No plugins declared." in capsys.readouterr().out

    def test_unknown_plugin_is_resolution_error(self, tmp_path: Path) -> None:
        make_workspace(tmp_path, projects={}, aliases={}, plugins=["no_such_plugin_xyz"])

        assert CLIRunner().run(["plugins", str(tmp_path)]) == EXIT_RESOLUTION_ERROR

    def test_invalid_config_is_usage_error(self, dotnet_workspace: Path) -> None:
        write_file(dotnet_workspace / ".nxkit.yml", "verbose_logging: maybe\n")

        assert CLIRunner().run(["plugins", str(dotnet_workspace)]) == EXIT_INVALID_USAGE


class TestTargetsCommand:
    """Tests for `nxkit targets`."""

    def test_prints_merged_targets(self, dotnet_workspace: Path, capsys) -> None:
        result = CLIRunner().run(["targets", "api", str(dotnet_workspace)])

        assert result == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out) == {
            "build": {"executor": "dotnet:build", "options": {"project": "apps/api/Api.csproj"}},
            "lint": {"executor": "dotnet:format", "options": {}},
        }

    def test_unknown_project(self, dotnet_workspace: Path, capsys) -> None:
        result = CLIRunner().run(["targets", "web", str(dotnet_workspace)])

        out = capsys.readouterr().out
        assert result == EXIT_INVALID_USAGE
        assert "Unknown project 'web'" in out
        assert "api, libA" in out

    def test_missing_workspace_is_resolution_error(self, tmp_path: Path) -> None:
        assert CLIRunner().run(["targets", "api", str(tmp_path)]) == EXIT_RESOLUTION_ERROR


class TestResolveCommand:
    """Tests for `nxkit resolve`."""

    def test_installed_module(self, dotnet_workspace: Path, capsys) -> None:
        result = CLIRunner().run(["resolve", "csproj_plugin", str(dotnet_workspace)])

        out = capsys.readouterr().out
        assert result == EXIT_SUCCESS
        assert "csproj_plugin: installed module" in out
        assert "csproj_plugin.py" in out
        assert "Manifest" not in out

    def test_local_project(self, dotnet_workspace: Path, capsys, monkeypatch) -> None:
        monkeypatch.setattr(sys, "path", list(sys.path))
        write_json(dotnet_workspace / "libs/a/package.json", {"name": "@ws/a-plugin"})

        result = CLIRunner().run(["resolve", "@ws/a", str(dotnet_workspace)])

        out = capsys.readouterr().out
        assert result == EXIT_SUCCESS
        assert "@ws/a: local project" in out
        assert "Package name: @ws/a-plugin" in out

    def test_not_found(self, dotnet_workspace: Path, capsys) -> None:
        result = CLIRunner().run(["resolve", "@ws/unknown", str(dotnet_workspace)])

        assert result == EXIT_RESOLUTION_ERROR
        assert "@ws/unknown: not found" in capsys.readouterr().out


class TestValidateCommand:
    """Tests for `nxkit validate`."""

    def test_valid_config(self, dotnet_workspace: Path, capsys) -> None:
        result = CLIRunner().run(["validate", str(dotnet_workspace)])

        assert result == EXIT_SUCCESS
        assert "Configuration is valid." in capsys.readouterr().out

    def test_invalid_config(self, tmp_path: Path, capsys) -> None:
        write_file(tmp_path / ".nxkit.yml", "aliases:\n  config_files: []\n")

        result = CLIRunner().run(["validate", str(tmp_path)])

        assert result == EXIT_ISSUES_FOUND
        assert "[aliases.config_files]" in capsys.readouterr().out

    def test_warnings_only(self, tmp_path: Path, capsys) -> None:
        write_file(tmp_path / ".nxkit.yml", "plugin: {}\n")

        result = CLIRunner().run(["validate", str(tmp_path)])

        out = capsys.readouterr().out
        assert result == EXIT_SUCCESS
        assert "Did you mean 'plugins'?" in out

    def test_no_config_file(self, tmp_path: Path, capsys) -> None:
        result = CLIRunner().run(["validate", str(tmp_path)])

        assert result == EXIT_INVALID_USAGE
        assert "No configuration file found." in capsys.readouterr().out

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        config = write_file(tmp_path / "custom.yml", "verbose_logging: true\n")

        assert CLIRunner().run(["validate", "--config", str(config)]) == EXIT_SUCCESS
