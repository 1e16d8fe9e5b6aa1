"""Resolution of plugin identifiers to projects of the current workspace."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from nxkit.config.models import DEFAULT_BUILD_EXECUTORS
from nxkit.core.errors import UnresolvableLocalIdentifierError
from nxkit.core.logging import get_logger
from nxkit.core.models import ProjectConfiguration, WorkspaceConfiguration

LOGGER = get_logger(__name__)


def find_project_for_import_path(
    identifier: str,
    workspace: WorkspaceConfiguration,
    root: Path,
    aliases: Mapping[str, List[str]],
    verbose: bool = False,
) -> Optional[str]:
    """Name the workspace project that owns the path alias ``identifier``.

    Each candidate path of the alias is made absolute against ``root`` and
    compared to every project root in declaration order. The first project
    whose root is a string prefix of any candidate wins, so ``libs/a`` also
    claims paths under ``libs/ab``.

    Returns:
        The project name, or None if ``identifier`` is not an alias.

    Raises:
        UnresolvableLocalIdentifierError: If the alias exists but no project
            root matches any of its paths.
    """
    if identifier not in aliases:
        return None

    possible_paths = [os.path.abspath(os.path.join(root, p)) for p in aliases[identifier]]

    project_root_mappings: Dict[str, str] = {}
    for name, project in workspace.projects.items():
        project_root_mappings[os.path.abspath(os.path.join(root, project.root))] = name

    for project_root, name in project_root_mappings.items():
        if any(p.startswith(project_root) for p in possible_paths):
            return name

    if verbose:
        LOGGER.warning(
            f"Unable to find local plugin {identifier}: "
            f"candidate paths {possible_paths}, project roots {project_root_mappings}"
        )
    raise UnresolvableLocalIdentifierError(identifier, possible_paths, project_root_mappings)


def read_plugin_main_from_project_configuration(
    project: ProjectConfiguration,
    executors: Sequence[str] = DEFAULT_BUILD_EXECUTORS,
) -> Optional[str]:
    """Return the ``main`` option of the project's package build target.

    The first target run by one of ``executors`` is used; without one, the
    ``build`` target's options are consulted.
    """
    for target in project.targets.values():
        if target.executor in executors:
            return target.options.get("main")

    build = project.targets.get("build")
    if build is not None:
        return build.options.get("main")
    return None


def register_workspace_sources(root: Path, config_file_name: str) -> None:
    """Make modules of the workspace at ``root`` importable by local plugins.

    Local plugins import their sibling workspace libraries by the same
    top-level names the alias configuration ``config_file_name`` declares,
    so the workspace root goes on the import path.
    """
    root_str = str(Path(root).resolve())
    if root_str not in sys.path:
        sys.path.insert(0, root_str)
    LOGGER.debug(f"Registered workspace sources at {root_str} ({config_file_name})")
