"""Exception hierarchy for plugin resolution and workspace loading."""

from __future__ import annotations

from typing import Dict, List, Sequence


class NxkitError(Exception):
    """Base class for all nxkit errors."""

    pass


class ConfigurationMissingError(NxkitError):
    """A required workspace configuration file does not exist."""

    def __init__(self, candidates: Sequence[str]) -> None:
        self.candidates = list(candidates)
        super().__init__(f"unable to find {' or '.join(self.candidates)}")


class JsonFileError(NxkitError):
    """A JSON configuration file could not be parsed."""

    pass


class UnresolvableLocalIdentifierError(NxkitError):
    """An identifier is a known path alias but no workspace project owns it."""

    def __init__(
        self,
        identifier: str,
        candidate_paths: List[str],
        project_roots: Dict[str, str],
    ) -> None:
        self.identifier = identifier
        self.candidate_paths = candidate_paths
        self.project_roots = project_roots
        super().__init__(
            f"Unable to resolve local plugin with import path {identifier}"
        )


class PluginNotFoundError(NxkitError, ModuleNotFoundError):
    """Neither an installed module nor a local project matches the identifier."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(
            f"Cannot find plugin '{identifier}' as an installed module or a local project",
            name=identifier,
        )


class PluginShapeError(NxkitError):
    """A loaded plugin module does not have the expected attributes."""

    pass
