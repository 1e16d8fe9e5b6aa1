"""Logging setup for nxkit.

Every nxkit module logs through ``get_logger(__name__)``. The CLI calls
:func:`configure_logging` once, before any workspace is read.
"""

from __future__ import annotations

import logging
from typing import Optional

LOGGER_NAME = "nxkit"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def level_for_flags(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> int:
    """Map CLI flags to a logging level.

    Precedence:
    - quiet → ERROR
    - debug → DEBUG
    - verbose → INFO
    - default → WARNING
    """
    if quiet:
        return logging.ERROR
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def configure_logging(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> None:
    """Configure root logging level based on CLI flags."""
    logging.basicConfig(
        level=level_for_flags(debug=debug, verbose=verbose, quiet=quiet),
        format=LOG_FORMAT,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger in the ``nxkit`` namespace.

    Names outside the namespace, such as those of plugin modules, are
    nested under it so one level setting covers all resolution output.
    """
    if name is None or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
