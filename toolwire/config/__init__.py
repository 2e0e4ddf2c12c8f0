"""Configuration access."""

from typing import Optional

from toolwire.config.manager import ConfigError, ConfigManager
from toolwire.config.models import LoggingConfig, ModelConfig, ToolwireConfig

_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def get_config() -> ToolwireConfig:
    return get_config_manager().load()


def reset_config_manager() -> None:
    """Drop the cached manager so the next access re-reads the file."""
    global _config_manager
    _config_manager = None


__all__ = [
    "ConfigError",
    "ConfigManager",
    "LoggingConfig",
    "ModelConfig",
    "ToolwireConfig",
    "get_config",
    "get_config_manager",
    "reset_config_manager",
]
