"""Plugin resolution context.

A :class:`PluginContext` is built once per process for one workspace root.
It owns the resolution caches and the collaborators used to find and load
plugin implementations, so resolving the same identifier twice never
repeats any work.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Union

from nxkit.config.loader import VERBOSE_LOGGING_ENV_VAR, is_truthy_flag
from nxkit.config.models import NxkitConfig
from nxkit.core.errors import PluginNotFoundError
from nxkit.core.logging import get_logger
from nxkit.core.models import (
    LocalPluginRef,
    PluginLocation,
    PluginPackageManifest,
    WorkspaceConfiguration,
)
from nxkit.plugins.aliases import read_path_aliases_file
from nxkit.plugins.base import NxPlugin
from nxkit.plugins.cache import PluginCaches
from nxkit.plugins.loader import derive_plugin_name, read_manifest_at
from nxkit.plugins.local import (
    find_project_for_import_path,
    read_plugin_main_from_project_configuration,
    register_workspace_sources,
)
from nxkit.plugins.resolution import (
    ModuleResolution,
    ResolutionStatus,
    load_plugin_module,
    resolve_installed_module,
)
from nxkit.workspace.fileutils import file_exists
from nxkit.workspace.workspaces import Workspaces

LOGGER = get_logger(__name__)

ModuleResolver = Callable[[str, Sequence[str]], ModuleResolution]
ModuleLoader = Callable[[Path], object]
WorkspaceFactory = Callable[[Path], Workspaces]
TranspilerHook = Callable[[Path, str], None]


class PluginContext:
    """Resolves plugin identifiers for one workspace and caches the results."""

    def __init__(
        self,
        root: Union[str, Path],
        config: Optional[NxkitConfig] = None,
        caches: Optional[PluginCaches] = None,
        module_resolver: ModuleResolver = resolve_installed_module,
        module_loader: ModuleLoader = load_plugin_module,
        workspace_factory: Optional[WorkspaceFactory] = None,
        register_transpiler: TranspilerHook = register_workspace_sources,
    ) -> None:
        self.root = Path(root).resolve()
        self.config = config if config is not None else NxkitConfig()
        self.caches = caches if caches is not None else PluginCaches()
        self._module_resolver = module_resolver
        self._module_loader = module_loader
        self._workspace_factory = workspace_factory or Workspaces
        self._register_transpiler = register_transpiler

    def load_plugins(
        self,
        identifiers: Optional[Sequence[str]],
        search_paths: Optional[Sequence[Union[str, Path]]] = None,
    ) -> List[NxPlugin]:
        """Resolve, load and name every plugin in ``identifiers``.

        Installed modules are looked up on ``search_paths`` first; an
        identifier that is not installed falls back to a workspace project.
        The first non-empty call populates the plugin cache and every later
        call returns that same list.

        Raises:
            PluginNotFoundError: If an identifier is neither installed nor local.
            UnresolvableLocalIdentifierError: If an alias has no owning project.
            ConfigurationMissingError: If no alias configuration exists.
        """
        if not identifiers:
            return []

        if self.caches.plugins is not None:
            if tuple(identifiers) != self.caches.plugin_identifiers:
                LOGGER.warning(
                    f"Plugins already loaded for {list(self.caches.plugin_identifiers)}; "
                    f"ignoring request for {list(identifiers)}"
                )
            return self.caches.plugins

        paths = self._search_paths(search_paths)
        plugins = [self._load_plugin(identifier, paths) for identifier in identifiers]

        self.caches.plugins = plugins
        self.caches.plugin_identifiers = tuple(identifiers)
        return plugins

    def _load_plugin(self, identifier: str, search_paths: List[str]) -> NxPlugin:
        plugin_path = self.locate_plugin(identifier, search_paths).path
        name = derive_plugin_name(plugin_path, self.config.plugins.manifest_file)
        module = self._module_loader(plugin_path)
        LOGGER.debug(f"Loaded plugin {name} ({identifier}) from {plugin_path}")
        return NxPlugin.from_module(module, name)

    def locate_plugin(
        self,
        identifier: str,
        search_paths: Optional[Sequence[Union[str, Path]]] = None,
    ) -> PluginLocation:
        """Find the implementation path of ``identifier`` without loading it.

        A local plugin points at the ``main`` output of its package build
        target, or at its project root when it declares none.

        Raises:
            PluginNotFoundError: If the identifier is neither installed nor local.
        """
        resolution = self._module_resolver(identifier, self._search_paths(search_paths))
        if resolution.status == ResolutionStatus.RESOLVED:
            assert resolution.path is not None
            return PluginLocation(identifier, resolution.path)
        if resolution.status == ResolutionStatus.ERROR:
            assert resolution.error is not None
            raise resolution.error

        local = self.resolve_local_plugin(identifier)
        if local is None:
            raise PluginNotFoundError(identifier)

        main = read_plugin_main_from_project_configuration(
            local.project_config, self.config.plugins.build_executors
        )
        workspace_root = local.workspace_root or self.root
        return PluginLocation(identifier, workspace_root / main if main else local.path, local)

    def read_plugin_package_manifest(
        self,
        identifier: str,
        search_paths: Optional[Sequence[Union[str, Path]]] = None,
    ) -> PluginPackageManifest:
        """Read a plugin's package manifest without loading the plugin.

        Follows the same installed-then-local order as :meth:`load_plugins`.
        An installed package without a manifest counts as not installed.

        Raises:
            PluginNotFoundError: If neither lookup finds the plugin.
            FileNotFoundError: If a local plugin project has no manifest.
        """
        manifest_file = self.config.plugins.manifest_file
        resolution = self._module_resolver(identifier, self._search_paths(search_paths))
        if resolution.status == ResolutionStatus.ERROR:
            assert resolution.error is not None
            raise resolution.error
        if resolution.status == ResolutionStatus.RESOLVED:
            assert resolution.path is not None
            if resolution.path.is_dir() and file_exists(resolution.path / manifest_file):
                return read_manifest_at(resolution.path, manifest_file)

        local = self.resolve_local_plugin(identifier)
        if local is None:
            raise PluginNotFoundError(identifier)
        return read_manifest_at(local.path, manifest_file)

    def resolve_local_plugin(
        self,
        identifier: str,
        root: Optional[Union[str, Path]] = None,
    ) -> Optional[LocalPluginRef]:
        """Find the workspace project that ``identifier`` refers to.

        Results, including None for identifiers that are not path aliases,
        are cached per identifier for the lifetime of the context.
        An explicit ``root`` selects the workspace the lookup reads; the
        returned ref remembers it, so the plugin entry point and the source
        registration use that workspace too.
        """
        if self.caches.has_local_plugin(identifier):
            return self.caches.local_plugins[identifier]

        ref = self._lookup_local_plugin(identifier, Path(root) if root is not None else self.root)
        self.caches.local_plugins[identifier] = ref
        return ref

    def _lookup_local_plugin(self, identifier: str, root: Path) -> Optional[LocalPluginRef]:
        workspace = self._workspace_factory(root).read_workspace_configuration(
            ignore_plugin_inference=True
        )
        project_name = find_project_for_import_path(
            identifier,
            workspace,
            root,
            self.read_path_aliases(root),
            verbose=self.verbose_logging,
        )
        if project_name is None:
            LOGGER.debug(f"{identifier} is not a path alias of {root}")
            return None

        self.ensure_transpiler_registered(root)

        project = workspace.projects[project_name]
        LOGGER.debug(f"Resolved {identifier} to local project {project_name}")
        return LocalPluginRef(
            path=root / project.root, project_config=project, workspace_root=root
        )

    def read_path_aliases(self, root: Optional[Union[str, Path]] = None) -> Dict[str, List[str]]:
        """Return the workspace path aliases, reading them on first use only."""
        if self.caches.path_aliases is None:
            self.caches.path_aliases = read_path_aliases_file(
                Path(root) if root is not None else self.root,
                self.config.aliases.config_files,
            )
        return self.caches.path_aliases

    @property
    def verbose_logging(self) -> bool:
        """Whether resolution diagnostics are logged.

        ``NX_VERBOSE_LOGGING`` is read on every access, so it applies even to
        a context built without ``load_config``.
        """
        return self.config.verbose_logging or is_truthy_flag(
            os.environ.get(VERBOSE_LOGGING_ENV_VAR)
        )

    def ensure_transpiler_registered(self, root: Optional[Union[str, Path]] = None) -> None:
        """Register workspace sources once, for the first local plugin's workspace."""
        if self.caches.transpiler_registered:
            return
        self._register_transpiler(
            Path(root) if root is not None else self.root,
            self.config.transpiler_config_file,
        )
        self.caches.transpiler_registered = True

    def read_workspace_configuration(self) -> WorkspaceConfiguration:
        """Read the workspace with plugin-inferred targets merged in."""
        return Workspaces(self.root, plugin_context=self).read_workspace_configuration()

    def _search_paths(self, search_paths: Optional[Sequence[Union[str, Path]]]) -> List[str]:
        if search_paths is not None:
            return [str(p) for p in search_paths]
        extra = [str(self.root / p) for p in self.config.plugins.search_paths]
        return [str(self.root), *extra, *sys.path]
