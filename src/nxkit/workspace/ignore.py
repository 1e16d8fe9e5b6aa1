"""Gitignore-style exclusion of workspace files from plugin inference.

Patterns come from the ``.nxignore`` file in the workspace root followed by
the ``ignore`` list of the nxkit configuration, so a configured ``!pattern``
can re-include a file the ignore file excludes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import pathspec

from nxkit.core.logging import get_logger

LOGGER = get_logger(__name__)

NXIGNORE_NAMES = [".nxignore"]


class IgnorePatterns:
    """Matches workspace-relative paths against gitignore-style patterns."""

    def __init__(self, patterns: Sequence[str], sources: Sequence[str] = ()) -> None:
        self._patterns = list(patterns)
        self.sources = list(sources)
        self._spec = pathspec.PathSpec.from_lines(
            pathspec.patterns.GitWildMatchPattern,
            [p for p in self._patterns if p.strip() and not p.strip().startswith("#")],
        )

    def __bool__(self) -> bool:
        return bool(self._spec.patterns)

    @property
    def patterns(self) -> List[str]:
        return list(self._patterns)

    def matches(self, relative_path: str) -> bool:
        """Check if a workspace-relative path matches the patterns."""
        return self._spec.match_file(relative_path.replace("\\", "/"))

    def filter(self, relative_paths: Iterable[str]) -> List[str]:
        """Return the paths that are not ignored, keeping their order."""
        return [path for path in relative_paths if not self.matches(path)]


def find_nxignore(workspace_root: Path) -> Optional[Path]:
    for name in NXIGNORE_NAMES:
        ignore_path = workspace_root / name
        if ignore_path.is_file():
            return ignore_path
    return None


def load_ignore_patterns(workspace_root: Path, config_patterns: Sequence[str]) -> IgnorePatterns:
    """Combine the workspace ignore file with the configured ``ignore`` list."""
    patterns: List[str] = []
    sources: List[str] = []

    ignore_file = find_nxignore(Path(workspace_root))
    if ignore_file is not None:
        patterns.extend(ignore_file.read_text(encoding="utf-8").splitlines())
        sources.append(str(ignore_file))

    if config_patterns:
        patterns.extend(config_patterns)
        sources.append("config.ignore")

    ignore = IgnorePatterns(patterns, sources)
    if ignore:
        LOGGER.debug(f"Ignoring project files matching patterns from {', '.join(sources)}")
    return ignore
