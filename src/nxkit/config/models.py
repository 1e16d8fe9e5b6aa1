"""Typed tool configuration for nxkit."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

DEFAULT_ALIAS_CONFIG_FILES = ["tsconfig.base.json", "tsconfig.json"]

# Executors whose `main` option points at a buildable plugin entry point
DEFAULT_BUILD_EXECUTORS = ["@nrwl/js:tsc", "@nrwl/js:swc", "@nrwl/node:package"]

DEFAULT_MANIFEST_FILE = "package.json"


@dataclass
class AliasConfig:
    """Where path aliases are read from, in priority order."""

    config_files: List[str] = field(default_factory=lambda: list(DEFAULT_ALIAS_CONFIG_FILES))


@dataclass
class PluginSettings:
    """Settings that influence how plugin identifiers are resolved."""

    build_executors: List[str] = field(default_factory=lambda: list(DEFAULT_BUILD_EXECUTORS))
    manifest_file: str = DEFAULT_MANIFEST_FILE
    search_paths: List[str] = field(default_factory=list)


@dataclass
class NxkitConfig:
    """Complete nxkit tool configuration."""

    aliases: AliasConfig = field(default_factory=AliasConfig)
    plugins: PluginSettings = field(default_factory=PluginSettings)
    verbose_logging: bool = False
    ignore: List[str] = field(default_factory=list)

    # Populated by the loader for diagnostics
    _config_sources: List[str] = field(default_factory=list, repr=False)

    @property
    def transpiler_config_file(self) -> str:
        """Config file handed to the source registration hook."""
        return self.aliases.config_files[0]
