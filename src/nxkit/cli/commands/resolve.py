"""Resolve command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import TYPE_CHECKING, Optional

from nxkit.cli.commands import Command
from nxkit.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_RESOLUTION_ERROR, EXIT_SUCCESS
from nxkit.core.errors import PluginNotFoundError

if TYPE_CHECKING:
    from nxkit.plugins.context import PluginContext


class ResolveCommand(Command):
    """Shows where a plugin identifier resolves to, without loading it."""

    @property
    def name(self) -> str:
        return "resolve"

    def execute(self, args: Namespace, context: Optional["PluginContext"] = None) -> int:
        """Print the installed location, or the local project, of an identifier.

        Returns:
            0 when resolved, 2 when the identifier is unknown.
        """
        if context is None:
            print("No workspace selected.")
            return EXIT_INVALID_USAGE

        identifier = args.identifier
        try:
            location = context.locate_plugin(identifier)
        except PluginNotFoundError:
            print(f"{identifier}: not found")
            return EXIT_RESOLUTION_ERROR

        if location.local is None:
            print(f"{identifier}: installed module")
        else:
            print(f"{identifier}: local project")
            print(f"  Root: {location.local.path}")
        print(f"  Entry point: {location.path}")

        try:
            manifest = context.read_plugin_package_manifest(identifier)
        except (FileNotFoundError, PluginNotFoundError):
            # Plugins without a package manifest are named after their path
            return EXIT_SUCCESS

        print(f"  Manifest: {manifest.path}")
        if manifest.manifest.get("name"):
            print(f"  Package name: {manifest.manifest['name']}")
        return EXIT_SUCCESS
