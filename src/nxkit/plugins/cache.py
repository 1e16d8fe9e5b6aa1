"""Process-lifetime caches for plugin resolution.

Nothing in here is ever invalidated: once an identifier has been resolved,
successfully or to "no local project", it is never looked up again by the
same :class:`~nxkit.plugins.context.PluginContext`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from nxkit.core.models import LocalPluginRef
from nxkit.plugins.base import NxPlugin


@dataclass
class PluginCaches:
    # Set by the first non-empty load_plugins call
    plugins: Optional[List[NxPlugin]] = None
    plugin_identifiers: Tuple[str, ...] = ()
    # None values are cached "not a local project" answers
    local_plugins: Dict[str, Optional[LocalPluginRef]] = field(default_factory=dict)
    path_aliases: Optional[Dict[str, List[str]]] = None
    transpiler_registered: bool = False

    def has_local_plugin(self, identifier: str) -> bool:
        return identifier in self.local_plugins
