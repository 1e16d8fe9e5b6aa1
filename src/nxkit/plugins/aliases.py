"""Path alias configuration of a workspace.

Aliases map an import-style identifier to candidate source paths relative to
the workspace root, read from ``compilerOptions.paths`` of the first alias
configuration file that exists.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Sequence

from nxkit.core.errors import ConfigurationMissingError
from nxkit.core.logging import get_logger
from nxkit.workspace.fileutils import file_exists, read_json_file

LOGGER = get_logger(__name__)


def find_alias_config(root: Path, candidates: Sequence[str]) -> Path:
    """Return the first existing alias configuration file.

    Raises:
        ConfigurationMissingError: If none of ``candidates`` exists.
    """
    for name in candidates:
        path = Path(root) / name
        if file_exists(path):
            return path
    raise ConfigurationMissingError(candidates)


def read_path_aliases_file(root: Path, candidates: Sequence[str]) -> Dict[str, List[str]]:
    """Read the alias mapping from the workspace at ``root``.

    A configuration that declares no aliases yields an empty mapping.
    """
    config_path = find_alias_config(root, candidates)
    data = read_json_file(config_path) or {}
    compiler_options = data.get("compilerOptions") or {}
    paths = compiler_options.get("paths") or {}
    LOGGER.debug(f"Read {len(paths)} path aliases from {config_path}")
    return {alias: list(targets) for alias, targets in paths.items()}
