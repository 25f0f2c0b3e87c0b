"""Configuration for modchanges runs."""

from settings.config import (
    CONFIG_FILENAME,
    ConfigError,
    ModChangesConfig,
    load_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ModChangesConfig",
    "load_config",
]
