"""Load and save the YAML configuration file."""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from toolwire.config.models import ToolwireConfig

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """The configuration file exists but cannot be used."""


class ConfigManager:
    """Reads ``config.yaml`` and resolves values against the environment."""

    DEFAULT_CONFIG_PATH = Path.home() / ".toolwire" / "config.yaml"

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else self.DEFAULT_CONFIG_PATH
        self._config: Optional[ToolwireConfig] = None

    def load(self) -> ToolwireConfig:
        """Load the config file, falling back to defaults when it does not exist.

        Raises:
            ConfigError: The file is not a YAML mapping or fails validation
        """
        if self._config is not None:
            return self._config

        if not self.config_path.exists():
            logger.debug("No config file at %s, using defaults", self.config_path)
            self._config = ToolwireConfig()
            return self._config

        try:
            data = yaml.safe_load(self.config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse {self.config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {self.config_path} is not a mapping")

        try:
            self._config = ToolwireConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid config in {self.config_path}: {e}") from e
        return self._config

    def save(self, config: ToolwireConfig) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        data = config.model_dump(mode="json", exclude_none=True)
        self.config_path.write_text(
            yaml.safe_dump(data, sort_keys=False, allow_unicode=True), encoding="utf-8"
        )
        self._config = config

    @staticmethod
    def get_effective_value(config_value: Any, env_var: str) -> Any:
        """Environment variable wins over the config value when set."""
        env_value = os.environ.get(env_var)
        if env_value:
            return env_value
        return config_value
