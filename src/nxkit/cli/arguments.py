"""Argument parser construction for nxkit CLI.

This module builds the argument parser with subcommands:
- nxkit plugins  - List the workspace's plugins
- nxkit targets  - Show the merged targets of a project
- nxkit resolve  - Show where a plugin identifier resolves to
- nxkit validate - Validate the nxkit configuration file
"""

from __future__ import annotations

import argparse
from pathlib import Path


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    """Add global options available to all commands."""
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show nxkit version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (info-level) logging and resolution diagnostics.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Reduce logging output to errors only.",
    )


def _add_workspace_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help="Path to config file (default: .nxkit.yml in the workspace root).",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Workspace root (default: current directory).",
    )


def _build_plugins_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'plugins' subcommand parser."""
    plugins_parser = subparsers.add_parser(
        "plugins",
        help="List the plugins declared by the workspace.",
        description=(
            "Resolve and load every plugin declared in nx.json and show "
            "the capabilities each one provides."
        ),
    )
    _add_workspace_options(plugins_parser)


def _build_targets_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'targets' subcommand parser."""
    targets_parser = subparsers.add_parser(
        "targets",
        help="Show the merged targets of a project.",
        description=(
            "Print the targets of a project as JSON, combining the targets "
            "inferred by plugins with the explicitly configured ones."
        ),
    )
    targets_parser.add_argument(
        "project",
        help="Name of the project.",
    )
    _add_workspace_options(targets_parser)


def _build_resolve_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'resolve' subcommand parser."""
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Show where a plugin identifier resolves to.",
        description=(
            "Resolve a plugin identifier as an installed module or a local "
            "workspace project without loading it."
        ),
    )
    resolve_parser.add_argument(
        "identifier",
        help="Plugin identifier (module name or path alias).",
    )
    _add_workspace_options(resolve_parser)


def _build_validate_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'validate' subcommand parser."""
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate the nxkit configuration file.",
    )
    _add_workspace_options(validate_parser)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser for nxkit CLI."""
    parser = argparse.ArgumentParser(
        prog="nxkit",
        description="nxkit - plugin resolution and target inference for monorepos.",
        epilog=(
            "Examples:\n"
            "  nxkit plugins                     # List workspace plugins\n"
            "  nxkit targets my-app              # Show targets of my-app\n"
            "  nxkit resolve @my-org/my-plugin   # Locate a plugin\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    _add_global_options(parser)

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands:",
        metavar="COMMAND",
    )

    _build_plugins_parser(subparsers)
    _build_targets_parser(subparsers)
    _build_resolve_parser(subparsers)
    _build_validate_parser(subparsers)

    return parser
