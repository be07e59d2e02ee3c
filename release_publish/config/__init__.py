"""Run configuration.

Settings are resolved with precedence: CLI flag > environment > YAML config
file > built-in defaults.
"""

from .settings import DEFAULT_CONFIG_FILENAME, PublishSettings, load_config_file, resolve_config_path, resolve_settings

__all__ = [
    "DEFAULT_CONFIG_FILENAME",
    "PublishSettings",
    "load_config_file",
    "resolve_config_path",
    "resolve_settings",
]
