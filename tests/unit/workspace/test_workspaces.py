"""Tests for nxkit.workspace.workspaces."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from nxkit.config.models import NxkitConfig
from nxkit.core.errors import ConfigurationMissingError, NxkitError
from nxkit.core.models import TargetConfiguration
from nxkit.plugins.context import PluginContext
from nxkit.workspace.workspaces import Workspaces
from tests.conftest import make_workspace, write_file, write_json

CSPROJ_PLUGIN = """
project_file_patterns = ["*.csproj"]


def register_project_targets(project_file):
    return {
        "build": {"executor": "dotnet:build", "options": {"project": project_file}},
        "test": {"executor": "dotnet:test"},
    }
"""


class TestReadWorkspaceConfiguration:
    """Tests for Workspaces.read_workspace_configuration."""

    def test_reads_inline_projects_in_order(self, tmp_path: Path) -> None:
        make_workspace(
            tmp_path,
            projects={
                "libB": {"root": "libs/b", "projectType": "library", "tags": ["scope:b"]},
                "libA": {"root": "libs/a", "sourceRoot": "libs/a/src"},
            },
        )

        workspace = Workspaces(tmp_path).read_workspace_configuration()

        assert list(workspace.projects) == ["libB", "libA"]
        assert workspace.projects["libB"].project_type == "library"
        assert workspace.projects["libB"].tags == ["scope:b"]
        assert workspace.projects["libA"].source_root == "libs/a/src"

    def test_reads_project_json(self, tmp_path: Path) -> None:
        make_workspace(tmp_path, projects={"app": "apps/app"})
        write_json(
            tmp_path / "apps/app/project.json",
            {"targets": {"serve": {"executor": "dotnet:run", "options": {"port": 5000}}}},
        )

        project = Workspaces(tmp_path).read_workspace_configuration().projects["app"]

        assert project.root == "apps/app"
        assert project.targets["serve"] == TargetConfiguration(
            executor="dotnet:run", options={"port": 5000}
        )

    def test_missing_project_json_raises(self, tmp_path: Path) -> None:
        make_workspace(tmp_path, projects={"app": "apps/app"})

        with pytest.raises(ConfigurationMissingError, match="project.json"):
            Workspaces(tmp_path).read_workspace_configuration()

    def test_invalid_project_entry_raises(self, tmp_path: Path) -> None:
        make_workspace(tmp_path, projects={"app": 42})

        with pytest.raises(NxkitError, match="app"):
            Workspaces(tmp_path).read_workspace_configuration()

    def test_missing_workspace_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationMissingError, match="workspace.json"):
            Workspaces(tmp_path).read_workspace_configuration()

    def test_plugins_from_nx_json(self, tmp_path: Path) -> None:
        make_workspace(tmp_path, projects={}, plugins=["dotnet_plugin"])

        workspace = Workspaces(tmp_path).read_workspace_configuration()

        assert workspace.plugins == ["dotnet_plugin"]

    def test_plugins_from_workspace_json(self, tmp_path: Path) -> None:
        write_json(tmp_path / "workspace.json", {"projects": {}, "plugins": ["gradle_plugin"]})

        workspace = Workspaces(tmp_path).read_workspace_configuration()

        assert workspace.plugins == ["gradle_plugin"]

    def test_no_inference_without_context(self, tmp_path: Path) -> None:
        make_workspace(tmp_path, projects={"app": {"root": "apps/app"}}, plugins=["x"])

        workspace = Workspaces(tmp_path).read_workspace_configuration()

        assert workspace.projects["app"].targets == {}

    def test_ignore_plugin_inference_skips_loading(self, tmp_path: Path) -> None:
        make_workspace(tmp_path, projects={"app": {"root": "apps/app"}}, plugins=["x"])
        context = MagicMock()

        Workspaces(tmp_path, plugin_context=context).read_workspace_configuration(
            ignore_plugin_inference=True
        )

        context.load_plugins.assert_not_called()


class TestPluginInference:
    """End-to-end target inference through a plugin context."""

    @pytest.fixture
    def dotnet_workspace(self, tmp_path: Path) -> Path:
        root = make_workspace(
            tmp_path,
            projects={
                "api": {
                    "root": "apps/api",
                    "targets": {"test": {"executor": "custom:test"}},
                },
                "web": {"root": "apps/web"},
            },
            aliases={},
            plugins=["csproj_plugin"],
        )
        write_file(root / "tools/csproj_plugin.py", CSPROJ_PLUGIN)
        write_file(root / "apps/api/Api.csproj")
        return root

    def _context(self, root: Path, ignore=None) -> PluginContext:
        config = NxkitConfig()
        config.plugins.search_paths = ["tools"]
        config.ignore = list(ignore or [])
        return PluginContext(root, config=config, register_transpiler=MagicMock())

    def test_merges_inferred_targets(self, dotnet_workspace: Path) -> None:
        workspace = self._context(dotnet_workspace).read_workspace_configuration()

        api = workspace.projects["api"]
        assert api.targets["build"] == TargetConfiguration(
            executor="dotnet:build", options={"project": "apps/api/Api.csproj"}
        )
        assert api.targets["test"].executor == "custom:test"
        assert workspace.projects["web"].targets == {}

    def test_config_ignore_excludes_project_files(self, dotnet_workspace: Path) -> None:
        context = self._context(dotnet_workspace, ignore=["apps/api/*.csproj"])

        workspace = context.read_workspace_configuration()

        assert "build" not in workspace.projects["api"].targets

    def test_nxignore_excludes_project_files(self, dotnet_workspace: Path) -> None:
        write_file(dotnet_workspace / ".nxignore", "# generated\napps/api/\n")

        workspace = self._context(dotnet_workspace).read_workspace_configuration()

        assert set(workspace.projects["api"].targets) == {"test"}
