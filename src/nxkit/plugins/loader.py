"""Helpers for turning a resolved plugin location into a named plugin."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from nxkit.core.models import PluginPackageManifest
from nxkit.plugins.resolution import LOADABLE_EXTENSIONS
from nxkit.workspace.fileutils import file_exists, read_json_file


def derive_plugin_name(plugin_path: Path, manifest_file: str) -> str:
    """Name a plugin after its package manifest, or after its location.

    The manifest is only consulted when ``plugin_path`` is not itself a
    loadable source file.
    """
    manifest_path = plugin_path / manifest_file
    if plugin_path.suffix not in LOADABLE_EXTENSIONS and file_exists(manifest_path):
        name = _read_manifest(manifest_path).get("name")
        if name:
            return str(name)
    return plugin_path.name


def read_manifest_at(directory: Path, manifest_file: str) -> PluginPackageManifest:
    """Read the package manifest stored in ``directory``.

    Raises:
        FileNotFoundError: If the manifest does not exist.
    """
    manifest_path = directory / manifest_file
    return PluginPackageManifest(path=manifest_path, manifest=_read_manifest(manifest_path))


def _read_manifest(path: Path) -> Dict[str, Any]:
    data = read_json_file(path)
    return data if isinstance(data, dict) else {}
