"""Configuration validation for nxkit.

Validates core configuration keys and warns on unknown keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

import yaml

from nxkit.core.logging import get_logger

LOGGER = get_logger(__name__)


class ValidationSeverity(Enum):
    """Severity level for validation issues."""

    ERROR = "error"  # Config will fail at runtime
    WARNING = "warning"  # Likely mistake but config usable


@dataclass
class ConfigValidationIssue:
    """A validation issue for configuration with severity."""

    message: str
    source: str
    severity: ValidationSeverity
    key: Optional[str] = None
    suggestion: Optional[str] = None


VALID_TOP_LEVEL_KEYS: Set[str] = {
    "version",
    "aliases",
    "plugins",
    "verbose_logging",
    "ignore",
}

VALID_ALIASES_KEYS: Set[str] = {
    "config_files",
}

VALID_PLUGINS_KEYS: Set[str] = {
    "build_executors",
    "manifest_file",
    "search_paths",
}

# Sections whose values must be lists of strings
_STRING_LIST_KEYS: Dict[str, Set[str]] = {
    "aliases": {"config_files"},
    "plugins": {"build_executors", "search_paths"},
}


def validate_config(data: Dict[str, Any], source: str) -> List[ConfigValidationIssue]:
    """Validate a configuration dictionary.

    Unknown keys are warnings; wrong value types are errors.
    Does not raise exceptions - returns issues instead.

    Args:
        data: Config dictionary to validate.
        source: Source file path for messages.

    Returns:
        List of validation issues.
    """
    issues: List[ConfigValidationIssue] = []

    if not isinstance(data, dict):
        issues.append(ConfigValidationIssue(
            message=f"Config must be a mapping, got {type(data).__name__}",
            source=source,
            severity=ValidationSeverity.ERROR,
        ))
        return issues

    _check_keys(data, VALID_TOP_LEVEL_KEYS, source, issues, prefix="")

    verbose = data.get("verbose_logging")
    if verbose is not None and not isinstance(verbose, bool):
        issues.append(ConfigValidationIssue(
            message="'verbose_logging' must be a boolean",
            source=source,
            severity=ValidationSeverity.ERROR,
            key="verbose_logging",
        ))

    ignore = data.get("ignore")
    if ignore is not None and not _is_string_list(ignore):
        issues.append(ConfigValidationIssue(
            message=f"'ignore' must be a list of strings, got {type(ignore).__name__}",
            source=source,
            severity=ValidationSeverity.ERROR,
            key="ignore",
        ))

    for section, valid_keys in (("aliases", VALID_ALIASES_KEYS), ("plugins", VALID_PLUGINS_KEYS)):
        section_data = data.get(section)
        if section_data is None:
            continue
        if not isinstance(section_data, dict):
            issues.append(ConfigValidationIssue(
                message=f"'{section}' must be a mapping, got {type(section_data).__name__}",
                source=source,
                severity=ValidationSeverity.ERROR,
                key=section,
            ))
            continue

        _check_keys(section_data, valid_keys, source, issues, prefix=f"{section}.")

        for key in _STRING_LIST_KEYS.get(section, set()):
            value = section_data.get(key)
            if value is not None and not _is_string_list(value):
                issues.append(ConfigValidationIssue(
                    message=f"'{section}.{key}' must be a list of strings",
                    source=source,
                    severity=ValidationSeverity.ERROR,
                    key=f"{section}.{key}",
                ))

    aliases = data.get("aliases")
    if isinstance(aliases, dict) and aliases.get("config_files") == []:
        issues.append(ConfigValidationIssue(
            message="'aliases.config_files' must name at least one file",
            source=source,
            severity=ValidationSeverity.ERROR,
            key="aliases.config_files",
        ))

    plugins = data.get("plugins")
    if isinstance(plugins, dict):
        manifest_file = plugins.get("manifest_file")
        if manifest_file is not None and not isinstance(manifest_file, str):
            issues.append(ConfigValidationIssue(
                message="'plugins.manifest_file' must be a string",
                source=source,
                severity=ValidationSeverity.ERROR,
                key="plugins.manifest_file",
            ))

    for issue in issues:
        if issue.severity == ValidationSeverity.WARNING:
            _log_warning(issue)

    return issues


def _check_keys(
    data: Dict[str, Any],
    valid_keys: Set[str],
    source: str,
    issues: List[ConfigValidationIssue],
    prefix: str,
) -> None:
    for key in data.keys():
        if key not in valid_keys:
            issues.append(ConfigValidationIssue(
                message=f"Unknown key '{prefix}{key}'",
                source=source,
                severity=ValidationSeverity.WARNING,
                key=f"{prefix}{key}",
                suggestion=_suggest_key(str(key), valid_keys),
            ))


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def _suggest_key(invalid_key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest a valid key for a potential typo.

    Args:
        invalid_key: The invalid key entered.
        valid_keys: Set of valid keys.

    Returns:
        Closest matching valid key, or None if no good match.
    """
    matches = get_close_matches(invalid_key, list(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _log_warning(issue: ConfigValidationIssue) -> None:
    """Log a validation warning."""
    msg = f"{issue.message} in {issue.source}"
    if issue.suggestion:
        msg += f" (did you mean '{issue.suggestion}'?)"
    LOGGER.warning(msg)


def validate_config_file(config_path: Path) -> Tuple[bool, List[ConfigValidationIssue]]:
    """Validate a configuration file from disk.

    Checks file existence, YAML syntax, and configuration semantics.

    Args:
        config_path: Path to the configuration file.

    Returns:
        Tuple of (is_valid, issues) where is_valid is False if any errors exist.
    """
    source = str(config_path)

    if not config_path.exists():
        return False, [ConfigValidationIssue(
            message=f"Configuration file not found: {config_path}",
            source=source,
            severity=ValidationSeverity.ERROR,
        )]

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return False, [ConfigValidationIssue(
            message=f"Invalid YAML syntax: {e}",
            source=source,
            severity=ValidationSeverity.ERROR,
        )]

    if data is None:
        return True, [ConfigValidationIssue(
            message="Configuration file is empty",
            source=source,
            severity=ValidationSeverity.WARNING,
        )]

    issues = validate_config(data, source)
    has_errors = any(issue.severity == ValidationSeverity.ERROR for issue in issues)
    return not has_errors, issues
