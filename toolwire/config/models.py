"""Configuration models."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from toolwire.core.types import PrivacyPair, ToolDefinition

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ModelConfig(BaseModel):
    name: str = "gpt-4.1"
    provider: str = "openai"
    api_key: Optional[str] = None
    base_url: Optional[str] = None


class LoggingConfig(BaseModel):
    level: str = "WARNING"

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"logging.level must be one of {', '.join(LOG_LEVELS)}")
        return level


class ToolwireConfig(BaseModel):
    """Contents of ``~/.toolwire/config.yaml``.

    ``privacy`` keeps the order of the file; it is significant for redaction.
    """

    model: ModelConfig = Field(default_factory=ModelConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    privacy: List[PrivacyPair] = Field(default_factory=list)
    tools: List[ToolDefinition] = Field(default_factory=list)
