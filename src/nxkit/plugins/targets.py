"""Merging of plugin-inferred targets with explicitly declared ones."""

from __future__ import annotations

import fnmatch
import posixpath
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from nxkit.core.logging import get_logger
from nxkit.core.models import TargetConfiguration
from nxkit.plugins.base import NxPlugin, is_relative_pattern
from nxkit.workspace.ignore import IgnorePatterns

LOGGER = get_logger(__name__)


def merge_targets(
    project_root: str,
    targets: Mapping[str, TargetConfiguration],
    plugins: Sequence[NxPlugin],
    root: Union[str, Path],
    ignore: Optional[IgnorePatterns] = None,
) -> Dict[str, TargetConfiguration]:
    """Combine targets inferred by plugins with a project's explicit targets.

    Plugins are visited in the order given. Only plugins declaring both file
    patterns and a target inference hook take part. The hook runs once per
    project file matching the plugin's patterns and receives the file path
    relative to the workspace root. Inferred targets with the same name
    overwrite each other (later plugins and later files win), and the
    explicit ``targets`` overwrite anything inferred.

    Args:
        project_root: Project root relative to the workspace root.
        targets: Targets declared in the project's configuration.
        plugins: Loaded plugins, in declaration order.
        root: Workspace root directory.
        ignore: Optional patterns excluding project files from inference.

    Returns:
        The merged target map.
    """
    inferred: Dict[str, TargetConfiguration] = {}
    for plugin in plugins:
        if not plugin.infers_targets:
            continue
        infer = plugin.register_project_targets

        file_paths = [
            posixpath.normpath(posixpath.join(project_root, project_file))
            for project_file in find_project_files(
                Path(root) / project_root, plugin.project_file_patterns
            )
        ]
        if ignore is not None:
            file_paths = ignore.filter(file_paths)

        for file_path in file_paths:
            LOGGER.debug(f"Inferring targets for {file_path} with plugin {plugin.name}")
            contributed = infer(file_path) or {}
            inferred.update(_coerce_targets(contributed))

    return {**inferred, **targets}


def find_project_files(cwd: Path, patterns: Sequence[str]) -> List[str]:
    """Find files under ``cwd`` matching any of ``patterns``.

    Patterns are relative globs, so ``*.csproj`` only matches files directly
    in ``cwd``. Hidden files and directories only match pattern segments
    that start with a dot themselves. Patterns that are absolute or climb out
    of ``cwd`` are skipped. Results are relative posix paths, sorted and free
    of duplicates.
    """
    if not cwd.is_dir():
        return []

    matches = set()
    for pattern in patterns:
        if not pattern:
            continue
        if not is_relative_pattern(pattern):
            LOGGER.warning(f"Skipping project file pattern {pattern!r}: not relative to {cwd}")
            continue
        dot_segments = [seg for seg in pattern.split("/") if seg.startswith(".")]
        for path in cwd.glob(pattern):
            if not path.is_file():
                continue
            relative = path.relative_to(cwd)
            if _is_hidden(relative.parts, dot_segments):
                continue
            matches.add(relative.as_posix())
    return sorted(matches)


def _is_hidden(parts: Sequence[str], dot_segments: Sequence[str]) -> bool:
    return any(
        part.startswith(".") and not any(fnmatch.fnmatchcase(part, seg) for seg in dot_segments)
        for part in parts
    )


def _coerce_targets(contributed: Mapping[str, Any]) -> Dict[str, TargetConfiguration]:
    result: Dict[str, TargetConfiguration] = {}
    for name, target in contributed.items():
        if isinstance(target, TargetConfiguration):
            result[name] = target
        else:
            result[name] = TargetConfiguration.from_dict(target)
    return result
