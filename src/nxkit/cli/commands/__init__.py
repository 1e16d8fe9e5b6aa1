"""CLI commands package.

This module provides the base Command class and exports all command implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from argparse import Namespace
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from nxkit.plugins.context import PluginContext


class Command(ABC):
    """Base class for CLI commands."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Command identifier."""

    @abstractmethod
    def execute(self, args: Namespace, context: Optional["PluginContext"] = None) -> int:
        """Execute the command.

        Args:
            args: Parsed command-line arguments.
            context: Plugin context of the selected workspace.

        Returns:
            Exit code (0 for success, non-zero for error).
        """


# ruff: noqa: E402
from nxkit.cli.commands.plugins import PluginsCommand
from nxkit.cli.commands.resolve import ResolveCommand
from nxkit.cli.commands.targets import TargetsCommand
from nxkit.cli.commands.validate import ValidateCommand

__all__ = [
    "Command",
    "PluginsCommand",
    "ResolveCommand",
    "TargetsCommand",
    "ValidateCommand",
]
