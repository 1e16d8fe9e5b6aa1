"""Targets command implementation."""

from __future__ import annotations

import json
from argparse import Namespace
from typing import TYPE_CHECKING, Optional

from nxkit.cli.commands import Command
from nxkit.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SUCCESS

if TYPE_CHECKING:
    from nxkit.plugins.context import PluginContext


class TargetsCommand(Command):
    """Prints the merged targets of one project as JSON."""

    @property
    def name(self) -> str:
        return "targets"

    def execute(self, args: Namespace, context: Optional["PluginContext"] = None) -> int:
        if context is None:
            print("No workspace selected.")
            return EXIT_INVALID_USAGE

        workspace = context.read_workspace_configuration()
        project = workspace.projects.get(args.project)
        if project is None:
            print(f"Unknown project '{args.project}'.")
            if workspace.projects:
                print(f"Known projects: {', '.join(workspace.projects)}")
            return EXIT_INVALID_USAGE

        targets = {name: target.to_dict() for name, target in project.targets.items()}
        print(json.dumps(targets, indent=2))
        return EXIT_SUCCESS
