"""Locating and loading plugin implementations.

Installed-module lookup returns an explicit :class:`ModuleResolution`
instead of raising, so callers can chain the fallback to local workspace
projects with plain conditionals.
"""

from __future__ import annotations

import importlib.machinery
import importlib.util
import re
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import ModuleType
from typing import Optional, Sequence

from nxkit.core.logging import get_logger

LOGGER = get_logger(__name__)

# Source files that can be loaded directly, without a package manifest
LOADABLE_EXTENSIONS = (".py",)

_MODULE_NAME_PREFIX = "nxkit_plugin_"


class ResolutionStatus(str, Enum):
    """Outcome of an installed-module lookup."""

    RESOLVED = "resolved"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class ModuleResolution:
    status: ResolutionStatus
    path: Optional[Path] = None
    error: Optional[BaseException] = None

    @classmethod
    def resolved(cls, path: Path) -> "ModuleResolution":
        return cls(ResolutionStatus.RESOLVED, path=path)

    @classmethod
    def not_found(cls) -> "ModuleResolution":
        return cls(ResolutionStatus.NOT_FOUND)

    @classmethod
    def failed(cls, error: BaseException) -> "ModuleResolution":
        return cls(ResolutionStatus.ERROR, error=error)


def resolve_installed_module(name: str, search_paths: Sequence[str]) -> ModuleResolution:
    """Find an importable module named ``name`` on ``search_paths``.

    Dotted names are walked component by component through package
    ``__path__`` locations. Names that are not valid module names
    (``@scope/pkg``) are reported as not found.

    Returns:
        RESOLVED with the package directory or module file, NOT_FOUND, or
        ERROR carrying the exception raised while searching.
    """
    parts = name.split(".")
    if not all(part.isidentifier() for part in parts):
        return ModuleResolution.not_found()

    paths = [str(p) for p in search_paths]
    spec = None
    try:
        for index in range(len(parts)):
            fullname = ".".join(parts[: index + 1])
            spec = importlib.machinery.PathFinder.find_spec(fullname, paths)
            if spec is None:
                return ModuleResolution.not_found()
            if index < len(parts) - 1:
                if not spec.submodule_search_locations:
                    return ModuleResolution.not_found()
                paths = list(spec.submodule_search_locations)
    except (OSError, ImportError) as e:
        return ModuleResolution.failed(e)

    assert spec is not None
    if spec.submodule_search_locations:
        return ModuleResolution.resolved(Path(list(spec.submodule_search_locations)[0]))
    if spec.origin is None:
        return ModuleResolution.not_found()
    return ModuleResolution.resolved(Path(spec.origin))


def module_name_for_path(path: Path) -> str:
    """Private ``sys.modules`` key for a plugin loaded from ``path``."""
    return _MODULE_NAME_PREFIX + re.sub(r"\W", "_", str(path.resolve()))


def load_plugin_module(path: Path) -> ModuleType:
    """Load and execute the plugin implementation at ``path``.

    ``path`` is either a source file or a package directory, which is loaded
    through its ``__init__.py``. Errors raised while executing the plugin
    propagate unchanged.

    Raises:
        FileNotFoundError: If there is nothing loadable at ``path``.
    """
    path = Path(path)
    module_name = module_name_for_path(path)

    if path.is_dir():
        init_file = path / "__init__.py"
        if not init_file.is_file():
            raise FileNotFoundError(f"Plugin package {path} has no __init__.py")
        spec = importlib.util.spec_from_file_location(
            module_name, init_file, submodule_search_locations=[str(path)]
        )
    elif path.is_file():
        spec = importlib.util.spec_from_file_location(module_name, path)
    else:
        raise FileNotFoundError(f"Plugin implementation not found: {path}")

    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load plugin implementation from {path}", path=str(path))

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise

    LOGGER.debug(f"Loaded plugin implementation from {path}")
    return module
