"""CLI runner orchestration.

This module handles command dispatch and execution for the nxkit CLI.
"""

from __future__ import annotations

from argparse import Namespace
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Dict, Iterable, Optional

from nxkit.cli.arguments import build_parser
from nxkit.cli.commands import (
    Command,
    PluginsCommand,
    ResolveCommand,
    TargetsCommand,
    ValidateCommand,
)
from nxkit.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_RESOLUTION_ERROR, EXIT_SUCCESS
from nxkit.config.loader import ConfigError, load_config
from nxkit.core.errors import NxkitError
from nxkit.core.logging import configure_logging, get_logger
from nxkit.plugins.context import PluginContext

LOGGER = get_logger(__name__)


def get_version() -> str:
    """Get nxkit version from package metadata, or the in-tree fallback."""
    try:
        return version("nxkit")
    except PackageNotFoundError:
        # Fallback for editable installs that have not yet built metadata.
        from nxkit import __version__
        return __version__


class CLIRunner:
    """Orchestrates CLI execution with subcommand dispatch."""

    def __init__(self) -> None:
        self.parser = build_parser()
        self._version = get_version()
        self.commands: Dict[str, Command] = {
            cmd.name: cmd
            for cmd in (PluginsCommand(), TargetsCommand(), ResolveCommand(), ValidateCommand())
        }

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv).

        Returns:
            Exit code.
        """
        # Handle --help specially to return 0
        if argv is not None:
            argv_list = list(argv)
            if "--help" in argv_list or "-h" in argv_list:
                self.parser.print_help()
                return EXIT_SUCCESS
        else:
            argv_list = None

        args = self.parser.parse_args(argv_list)

        configure_logging(
            debug=args.debug,
            verbose=args.verbose,
            quiet=args.quiet,
        )

        if args.version:
            print(self._version)
            return EXIT_SUCCESS

        command = self.commands.get(getattr(args, "command", None) or "")
        if command is None:
            self.parser.print_help()
            return EXIT_SUCCESS

        if command.name == "validate":
            return command.execute(args)

        context = self._build_context(args)
        if context is None:
            return EXIT_INVALID_USAGE

        try:
            return command.execute(args, context)
        except ConfigError as e:
            LOGGER.error(str(e))
            return EXIT_INVALID_USAGE
        except (NxkitError, ImportError, OSError) as e:
            if args.debug:
                LOGGER.exception(f"{command.name} failed")
            LOGGER.error(f"{command.name} failed: {e}")
            return EXIT_RESOLUTION_ERROR

    def _build_context(self, args: Namespace) -> Optional[PluginContext]:
        workspace_root = Path(args.path).resolve()
        cli_overrides = {"verbose_logging": True} if args.verbose else None

        try:
            config = load_config(
                workspace_root=workspace_root,
                cli_config_path=getattr(args, "config", None),
                cli_overrides=cli_overrides,
            )
        except ConfigError as e:
            LOGGER.error(str(e))
            return None

        return PluginContext(workspace_root, config=config)
