"""Tool configuration for nxkit."""

from nxkit.config.loader import ConfigError, load_config
from nxkit.config.models import AliasConfig, NxkitConfig, PluginSettings

__all__ = [
    "AliasConfig",
    "ConfigError",
    "NxkitConfig",
    "PluginSettings",
    "load_config",
]
