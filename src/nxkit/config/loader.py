"""Configuration file loading and merging.

Handles loading nxkit tool configuration with:
- Workspace-level config (.nxkit.yml)
- Environment variable expansion (${VAR})
- The NX_VERBOSE_LOGGING environment flag
- Config merging with proper precedence
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from nxkit.config.models import AliasConfig, NxkitConfig, PluginSettings
from nxkit.config.validation import ValidationSeverity, validate_config
from nxkit.core.errors import NxkitError
from nxkit.core.logging import get_logger

LOGGER = get_logger(__name__)

PROJECT_CONFIG_NAMES = [".nxkit.yml", ".nxkit.yaml", "nxkit.yml", "nxkit.yaml"]

VERBOSE_LOGGING_ENV_VAR = "NX_VERBOSE_LOGGING"

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


class ConfigError(NxkitError):
    """Configuration loading or parsing error."""

    pass


def load_config(
    workspace_root: Path,
    cli_config_path: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> NxkitConfig:
    """Load configuration with proper precedence.

    Precedence (highest to lowest):
    1. CLI flags (cli_overrides)
    2. Custom config file (cli_config_path) OR workspace config (.nxkit.yml)
    3. Built-in defaults

    NX_VERBOSE_LOGGING turns verbose logging on regardless of the layers above.

    Args:
        workspace_root: Workspace root directory for finding .nxkit.yml.
        cli_config_path: Optional path to custom config file (--config flag).
        cli_overrides: Dict of CLI flag overrides.
        environ: Environment mapping, defaults to os.environ.

    Returns:
        Merged NxkitConfig instance.

    Raises:
        ConfigError: If the config file is missing, unparsable or invalid.
    """
    sources: List[str] = []
    merged: Dict[str, Any] = {}

    env = os.environ if environ is None else environ

    if cli_config_path:
        if not cli_config_path.exists():
            raise ConfigError(f"Config file not found: {cli_config_path}")
        merged = merge_configs(merged, _load_validated(cli_config_path, env))
        sources.append(f"custom:{cli_config_path}")
        LOGGER.debug(f"Loaded custom config from {cli_config_path}")
    else:
        project_path = find_project_config(workspace_root)
        if project_path is not None:
            merged = merge_configs(merged, _load_validated(project_path, env))
            sources.append(f"project:{project_path}")
            LOGGER.debug(f"Loaded workspace config from {project_path}")

    if cli_overrides:
        merged = merge_configs(merged, cli_overrides)
        sources.append("cli")
        LOGGER.debug("Applied CLI overrides")

    config = dict_to_config(merged)

    if is_truthy_flag(env.get(VERBOSE_LOGGING_ENV_VAR)):
        config.verbose_logging = True
        sources.append(f"env:{VERBOSE_LOGGING_ENV_VAR}")

    config._config_sources = sources
    LOGGER.debug(f"Config loaded from sources: {sources}")
    return config


def _load_validated(path: Path, environ: Mapping[str, str]) -> Dict[str, Any]:
    try:
        data = load_yaml_file(path, environ)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    errors = [
        issue for issue in validate_config(data, source=str(path))
        if issue.severity == ValidationSeverity.ERROR
    ]
    if errors:
        raise ConfigError("; ".join(f"{issue.message} in {issue.source}" for issue in errors))
    return data


def is_truthy_flag(value: Optional[str]) -> bool:
    """Interpret an environment flag the way shell users expect."""
    if value is None:
        return False
    return value.strip().lower() not in ("", "0", "false", "no", "off")


def find_project_config(workspace_root: Path) -> Optional[Path]:
    """Find config file in the workspace root.

    Args:
        workspace_root: Directory to search in.

    Returns:
        Path to config file if found, None otherwise.
    """
    for name in PROJECT_CONFIG_NAMES:
        config_path = workspace_root / name
        if config_path.exists():
            return config_path
    return None


def load_yaml_file(path: Path, environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Parse a YAML config file and expand ``${VAR}`` references in its strings.

    Raises:
        yaml.YAMLError: If YAML parsing fails.
        ConfigError: If the document is not a mapping.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must hold a YAML mapping, got {type(data).__name__}")

    return expand_env_vars(data, environ)


def expand_env_vars(data: Any, environ: Optional[Mapping[str, str]] = None) -> Any:
    """Recursively expand ${VAR} and ${VAR:-default} in config values.

    Unset variables without a default expand to an empty string.
    """
    env = os.environ if environ is None else environ

    def replace(match: re.Match) -> str:
        name, default = match.group(1), match.group(2)
        if name in env:
            return env[name]
        if default is not None:
            return default
        LOGGER.warning(f"Environment variable ${name} is not set and has no default")
        return ""

    def expand(value: Any) -> Any:
        if isinstance(value, dict):
            return {k: expand(v) for k, v in value.items()}
        if isinstance(value, list):
            return [expand(item) for item in value]
        if isinstance(value, str):
            return ENV_VAR_PATTERN.sub(replace, value)
        return value

    return expand(data)


def merge_configs(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two config dicts, with overlay taking precedence.

    Rules:
    - Scalar values: overlay replaces base
    - Lists: overlay replaces base (no merging)
    - Dicts: recursive merge
    """
    result = base.copy()

    for key, overlay_value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(overlay_value, dict):
            result[key] = merge_configs(result[key], overlay_value)
        else:
            result[key] = overlay_value

    return result


def dict_to_config(data: Dict[str, Any]) -> NxkitConfig:
    """Convert validated dict to typed NxkitConfig."""
    defaults = NxkitConfig()

    aliases_data = data.get("aliases") or {}
    aliases = AliasConfig(
        config_files=list(aliases_data.get("config_files", defaults.aliases.config_files)),
    )

    plugins_data = data.get("plugins") or {}
    plugins = PluginSettings(
        build_executors=list(plugins_data.get("build_executors", defaults.plugins.build_executors)),
        manifest_file=plugins_data.get("manifest_file", defaults.plugins.manifest_file),
        search_paths=list(plugins_data.get("search_paths", [])),
    )

    return NxkitConfig(
        aliases=aliases,
        plugins=plugins,
        verbose_logging=bool(data.get("verbose_logging", False)),
        ignore=list(data.get("ignore", [])),
    )
