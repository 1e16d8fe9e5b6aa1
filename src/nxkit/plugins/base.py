"""The plugin interface.

A plugin is a Python module. It either exposes a module-level ``plugin``
attribute holding an :class:`NxPlugin`, or any of these module-level
attributes:

    project_file_patterns = ["*.csproj", "pom.xml"]

    def register_project_targets(project_file):
        return {"build": {"executor": "...", "options": {...}}}

    def process_project_graph(graph, context):
        return graph

The plugin's ``name`` is always assigned by the loader.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import PurePosixPath, PureWindowsPath
from types import ModuleType
from typing import Any, Callable, List, Mapping, Optional

from nxkit.core.errors import PluginShapeError

ProjectTargetConfigurator = Callable[[str], Mapping[str, Any]]
ProjectGraphProcessor = Callable[..., Any]


def is_relative_pattern(pattern: str) -> bool:
    """Whether a project file glob stays inside the directory it runs in."""
    if PurePosixPath(pattern).is_absolute() or PureWindowsPath(pattern).is_absolute():
        return False
    return ".." not in pattern.replace("\\", "/").split("/")


def _check_patterns(patterns: Any, name: str) -> None:
    if not isinstance(patterns, (list, tuple)) or not all(isinstance(p, str) for p in patterns):
        raise PluginShapeError(
            f"Plugin '{name}': project_file_patterns must be a list of strings"
        )
    for pattern in patterns:
        if not is_relative_pattern(pattern):
            raise PluginShapeError(
                f"Plugin '{name}': project file pattern {pattern!r} must be a relative "
                "path inside the project"
            )


@dataclass
class NxPlugin:
    """A loaded plugin and the optional capabilities it provides."""

    name: str
    project_file_patterns: Optional[List[str]] = None
    register_project_targets: Optional[ProjectTargetConfigurator] = None
    process_project_graph: Optional[ProjectGraphProcessor] = None
    module: Optional[ModuleType] = field(default=None, repr=False, compare=False)

    @property
    def infers_targets(self) -> bool:
        """Whether the plugin takes part in target inference."""
        return bool(self.project_file_patterns) and self.register_project_targets is not None

    @property
    def capabilities(self) -> List[str]:
        found = []
        if self.project_file_patterns:
            found.append("project_file_patterns")
        if self.register_project_targets is not None:
            found.append("register_project_targets")
        if self.process_project_graph is not None:
            found.append("process_project_graph")
        return found

    @classmethod
    def from_module(cls, module: ModuleType, name: str) -> "NxPlugin":
        """Build a plugin from a loaded module and give it ``name``.

        Raises:
            PluginShapeError: If an attribute has the wrong type, or a file
                pattern is absolute or leaves the project.
        """
        declared = getattr(module, "plugin", None)
        if isinstance(declared, NxPlugin):
            if declared.project_file_patterns is not None:
                _check_patterns(declared.project_file_patterns, name)
            return dataclasses.replace(declared, name=name, module=module)

        patterns = getattr(module, "project_file_patterns", None)
        if patterns is not None:
            _check_patterns(patterns, name)
            patterns = list(patterns)

        hooks = {}
        for attr in ("register_project_targets", "process_project_graph"):
            hook = getattr(module, attr, None)
            if hook is not None and not callable(hook):
                raise PluginShapeError(f"Plugin '{name}': {attr} must be callable")
            hooks[attr] = hook

        return cls(
            name=name,
            project_file_patterns=patterns,
            module=module,
            **hooks,
        )
