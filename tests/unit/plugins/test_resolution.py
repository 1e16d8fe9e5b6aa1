"""Tests for nxkit.plugins.resolution."""

from __future__ import annotations

import importlib.machinery
import sys
from pathlib import Path

import pytest

from nxkit.plugins.resolution import (
    ModuleResolution,
    ResolutionStatus,
    load_plugin_module,
    module_name_for_path,
    resolve_installed_module,
)
from tests.conftest import write_file


class TestResolveInstalledModule:
    """Tests for resolve_installed_module."""

    def test_resolves_package_to_directory(self, tmp_path: Path) -> None:
        write_file(tmp_path / "site" / "gradle_plugin" / "__init__.py")

        result = resolve_installed_module("gradle_plugin", [str(tmp_path / "site")])

        assert result.status == ResolutionStatus.RESOLVED
        assert result.path == tmp_path / "site" / "gradle_plugin"

    def test_resolves_module_to_file(self, tmp_path: Path) -> None:
        write_file(tmp_path / "site" / "single_plugin.py")

        result = resolve_installed_module("single_plugin", [str(tmp_path / "site")])

        assert result.status == ResolutionStatus.RESOLVED
        assert result.path == tmp_path / "site" / "single_plugin.py"

    def test_resolves_dotted_submodule(self, tmp_path: Path) -> None:
        write_file(tmp_path / "site" / "acme" / "__init__.py")
        write_file(tmp_path / "site" / "acme" / "nx_plugin.py")

        result = resolve_installed_module("acme.nx_plugin", [str(tmp_path / "site")])

        assert result.status == ResolutionStatus.RESOLVED
        assert result.path == tmp_path / "site" / "acme" / "nx_plugin.py"

    def test_missing_module_is_not_found(self, tmp_path: Path) -> None:
        result = resolve_installed_module("no_such_plugin_xyz", [str(tmp_path)])

        assert result == ModuleResolution.not_found()

    def test_missing_submodule_is_not_found(self, tmp_path: Path) -> None:
        write_file(tmp_path / "acme.py")

        result = resolve_installed_module("acme.nx_plugin", [str(tmp_path)])

        assert result.status == ResolutionStatus.NOT_FOUND

    def test_scoped_identifier_is_not_found(self, tmp_path: Path) -> None:
        result = resolve_installed_module("@ws/plugin", [str(tmp_path)])

        assert result.status == ResolutionStatus.NOT_FOUND

    def test_search_errors_are_reported(self, tmp_path: Path, monkeypatch) -> None:
        error = PermissionError("denied")

        def _raise(*args, **kwargs):
            raise error

        monkeypatch.setattr(importlib.machinery.PathFinder, "find_spec", _raise)

        result = resolve_installed_module("gradle_plugin", [str(tmp_path)])

        assert result.status == ResolutionStatus.ERROR
        assert result.error is error


class TestLoadPluginModule:
    """Tests for load_plugin_module."""

    def test_loads_source_file(self, tmp_path: Path) -> None:
        path = write_file(tmp_path / "plugin.py", "project_file_patterns = ['pom.xml']\n")

        module = load_plugin_module(path)

        assert module.project_file_patterns == ["pom.xml"]
        assert sys.modules[module_name_for_path(path)] is module

    def test_loads_package_directory(self, tmp_path: Path) -> None:
        write_file(tmp_path / "pkg" / "__init__.py", "from .hooks import infer\n")
        write_file(tmp_path / "pkg" / "hooks.py", "def infer(f):\n    return {}\n")

        module = load_plugin_module(tmp_path / "pkg")

        assert module.infer("x") == {}

    def test_directory_without_init_raises(self, tmp_path: Path) -> None:
        (tmp_path / "empty").mkdir()

        with pytest.raises(FileNotFoundError):
            load_plugin_module(tmp_path / "empty")

    def test_missing_path_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_plugin_module(tmp_path / "missing.py")

    def test_syntax_errors_propagate(self, tmp_path: Path) -> None:
        path = write_file(tmp_path / "broken.py", "def oops(:\n")

        with pytest.raises(SyntaxError):
            load_plugin_module(path)

        assert module_name_for_path(path) not in sys.modules

    def test_runtime_errors_propagate(self, tmp_path: Path) -> None:
        path = write_file(tmp_path / "failing.py", "raise RuntimeError('boom')\n")

        with pytest.raises(RuntimeError, match="boom"):
            load_plugin_module(path)
