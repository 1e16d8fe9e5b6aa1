"""Reading workspace and project configuration from disk."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from nxkit.core.errors import ConfigurationMissingError, NxkitError
from nxkit.core.logging import get_logger
from nxkit.core.models import ProjectConfiguration, WorkspaceConfiguration
from nxkit.plugins.targets import merge_targets
from nxkit.workspace.fileutils import file_exists, read_json_file
from nxkit.workspace.ignore import load_ignore_patterns

if TYPE_CHECKING:
    from nxkit.plugins.context import PluginContext

LOGGER = get_logger(__name__)

WORKSPACE_FILE = "workspace.json"
NX_JSON_FILE = "nx.json"
PROJECT_FILE = "project.json"


class Workspaces:
    """Reads the configuration of the workspace rooted at ``root``.

    ``workspace.json`` lists projects in declaration order, either inline or
    as the path of a directory holding a ``project.json``. Plugins are
    declared in ``nx.json`` (or in ``workspace.json`` itself).
    """

    def __init__(
        self,
        root: Union[str, Path],
        plugin_context: Optional["PluginContext"] = None,
    ) -> None:
        self.root = Path(root)
        self._plugin_context = plugin_context

    def read_workspace_configuration(
        self,
        ignore_plugin_inference: bool = False,
    ) -> WorkspaceConfiguration:
        """Read every project of the workspace.

        When a plugin context is attached and ``ignore_plugin_inference`` is
        not set, the declared plugins are loaded and each project's targets
        become the merge of inferred and explicit targets.

        Raises:
            ConfigurationMissingError: If workspace.json does not exist.
        """
        workspace_path = self.root / WORKSPACE_FILE
        if not file_exists(workspace_path):
            raise ConfigurationMissingError([WORKSPACE_FILE])

        data = read_json_file(workspace_path) or {}
        projects = {
            name: self._read_project(name, entry)
            for name, entry in (data.get("projects") or {}).items()
        }

        nx_json: Dict[str, Any] = {}
        if file_exists(self.root / NX_JSON_FILE):
            nx_json = read_json_file(self.root / NX_JSON_FILE) or {}
        plugins = list(nx_json.get("plugins") or data.get("plugins") or [])

        workspace = WorkspaceConfiguration(
            version=data.get("version", 2),
            projects=projects,
            plugins=plugins,
        )

        if ignore_plugin_inference or not plugins or self._plugin_context is None:
            return workspace

        loaded = self._plugin_context.load_plugins(plugins)
        ignore = load_ignore_patterns(self.root, self._plugin_context.config.ignore)
        for project in workspace.projects.values():
            project.targets = merge_targets(
                project.root, project.targets, loaded, self.root, ignore
            )
        return workspace

    def _read_project(self, name: str, entry: Any) -> ProjectConfiguration:
        if isinstance(entry, str):
            project_path = self.root / entry / PROJECT_FILE
            if not file_exists(project_path):
                raise ConfigurationMissingError([str(Path(entry) / PROJECT_FILE)])
            data = read_json_file(project_path) or {}
            data.setdefault("root", entry)
            return ProjectConfiguration.from_dict(data)
        if isinstance(entry, dict):
            return ProjectConfiguration.from_dict(entry)
        raise NxkitError(f"Invalid configuration for project '{name}' in {WORKSPACE_FILE}")
