from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional


@dataclass
class TargetConfiguration:
    """A named build/test/lint step: an executor plus its options."""

    executor: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TargetConfiguration":
        """Build a target from its JSON representation.

        Keys other than ``executor`` and ``options`` (``outputs``,
        ``dependsOn``, ``configurations``...) are kept verbatim in ``extra``.
        """
        options = data.get("options")
        return cls(
            executor=data.get("executor"),
            options=dict(options) if isinstance(options, Mapping) else {},
            extra={k: v for k, v in data.items() if k not in ("executor", "options")},
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = dict(self.extra)
        if self.executor is not None:
            result["executor"] = self.executor
        result["options"] = dict(self.options)
        return result


@dataclass
class ProjectConfiguration:
    """Configuration of a single workspace project. Read-only to plugin resolution."""

    root: str
    targets: Dict[str, TargetConfiguration] = field(default_factory=dict)
    source_root: Optional[str] = None
    project_type: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProjectConfiguration":
        targets_data = data.get("targets") or {}
        return cls(
            root=data.get("root", ""),
            targets={
                name: TargetConfiguration.from_dict(target)
                for name, target in targets_data.items()
                if isinstance(target, Mapping)
            },
            source_root=data.get("sourceRoot"),
            project_type=data.get("projectType"),
            tags=list(data.get("tags") or []),
        )


@dataclass
class WorkspaceConfiguration:
    """Projects of a workspace in declaration order, plus the declared plugins."""

    version: int = 2
    projects: Dict[str, ProjectConfiguration] = field(default_factory=dict)
    plugins: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class LocalPluginRef:
    """A plugin identifier resolved to an in-repository project."""

    path: Path
    project_config: ProjectConfiguration
    workspace_root: Optional[Path] = None


@dataclass(frozen=True)
class PluginPackageManifest:
    """Location and parsed content of a plugin's package manifest."""

    path: Path
    manifest: Dict[str, Any]


@dataclass(frozen=True)
class PluginLocation:
    """Where a plugin identifier resolved to.

    ``local`` is set when the identifier named a workspace project rather
    than an installed module.
    """

    identifier: str
    path: Path
    local: Optional[LocalPluginRef] = None
