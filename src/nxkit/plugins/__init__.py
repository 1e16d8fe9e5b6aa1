"""Plugin resolution for nxkit.

This package turns plugin identifiers into loaded plugins:
- installed Python modules, found on the plugin search paths
- local workspace projects, found through the workspace path aliases

and merges the targets those plugins infer with explicit project targets.
"""

from nxkit.plugins.base import NxPlugin
from nxkit.plugins.cache import PluginCaches
from nxkit.plugins.context import PluginContext
from nxkit.plugins.local import (
    find_project_for_import_path,
    read_plugin_main_from_project_configuration,
)
from nxkit.plugins.resolution import (
    ModuleResolution,
    ResolutionStatus,
    load_plugin_module,
    resolve_installed_module,
)
from nxkit.plugins.targets import merge_targets

__all__ = [
    "ModuleResolution",
    "NxPlugin",
    "PluginCaches",
    "PluginContext",
    "ResolutionStatus",
    "find_project_for_import_path",
    "load_plugin_module",
    "merge_targets",
    "read_plugin_main_from_project_configuration",
    "resolve_installed_module",
]
