"""Plugins command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import TYPE_CHECKING, Optional

from nxkit.cli.commands import Command
from nxkit.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SUCCESS

if TYPE_CHECKING:
    from nxkit.plugins.context import PluginContext


class PluginsCommand(Command):
    """Lists the plugins declared by the workspace."""

    @property
    def name(self) -> str:
        return "plugins"

    def execute(self, args: Namespace, context: Optional["PluginContext"] = None) -> int:
        """Load the declared plugins and print their capabilities.

        Resolution errors propagate to the runner.
        """
        if context is None:
            print("No workspace selected.")
            return EXIT_INVALID_USAGE

        workspace = context.read_workspace_configuration()
        if not workspace.plugins:
            print("No plugins declared.")
            print()
            print('Declare plugins in nx.json, e.g.: {"plugins": ["my_plugin"]}')
            return EXIT_SUCCESS

        plugins = context.load_plugins(workspace.plugins)

        print("Workspace plugins:")
        print()
        for identifier, plugin in zip(workspace.plugins, plugins):
            print(f"  {plugin.name}")
            if plugin.name != identifier:
                print(f"    Identifier: {identifier}")
            if plugin.project_file_patterns:
                print(f"    Project files: {', '.join(plugin.project_file_patterns)}")
            capabilities = ", ".join(plugin.capabilities) or "none"
            print(f"    Capabilities: {capabilities}")
            print()

        return EXIT_SUCCESS
