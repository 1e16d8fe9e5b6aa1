"""nxkit - plugin resolution and target inference for monorepo workspaces."""

from __future__ import annotations

__version__ = "0.1.0"

from nxkit.core.models import (  # noqa: E402
    LocalPluginRef,
    ProjectConfiguration,
    TargetConfiguration,
    WorkspaceConfiguration,
)
from nxkit.plugins import (  # noqa: E402
    NxPlugin,
    PluginCaches,
    PluginContext,
    merge_targets,
)

__all__ = [
    "__version__",
    "LocalPluginRef",
    "NxPlugin",
    "PluginCaches",
    "PluginContext",
    "ProjectConfiguration",
    "TargetConfiguration",
    "WorkspaceConfiguration",
    "merge_targets",
]
