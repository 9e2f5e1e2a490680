"""Configuration for tagseek."""

from settings.config import (
    CONFIG_FILENAME,
    BridgeConfig,
    ConfigError,
    TagSeekConfig,
    load_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "BridgeConfig",
    "ConfigError",
    "TagSeekConfig",
    "load_config",
]
