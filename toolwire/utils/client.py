"""LLM calls through LiteLLM with privacy masking around each request."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import litellm

from ..config import get_config, get_config_manager
from ..core.privacy import PrivacyPairs, redact_json, restore_json
from ..core.types import ToolCall, ToolDefinition, as_privacy_pairs
from ..decoding import decode_tool_calls
from ..encoding import encode_tools

logger = logging.getLogger(__name__)

# Suppress debug info from litellm
litellm.suppress_debug_info = True

PROVIDER_ENV_VARS = {
    "openai": {"api_key": "OPENAI_API_KEY", "base_url": "OPENAI_BASE_URL"},
    "anthropic": {"api_key": "ANTHROPIC_API_KEY"},
    "gemini": {"api_key": "GEMINI_API_KEY"},
    "azure": {"api_key": "AZURE_API_KEY", "base_url": "AZURE_API_BASE"},
    "openrouter": {"api_key": "OPENROUTER_API_KEY"},
    "groq": {"api_key": "GROQ_API_KEY"},
    "mistral": {"api_key": "MISTRAL_API_KEY"},
    "ollama": {"base_url": "OLLAMA_BASE_URL"},
}

MODEL_ENV_VAR = "TOOLWIRE_MODEL"


@dataclass(frozen=True)
class ModelSettings:
    model: str
    api_key: Optional[str]
    base_url: Optional[str]


def _get_provider_env_var_name(provider: str, key: str = "api_key") -> str:
    provider_lower = provider.lower()
    suffix = "API_KEY" if key == "api_key" else "BASE_URL"
    default = f"{provider.upper()}_{suffix}"
    return PROVIDER_ENV_VARS.get(provider_lower, {}).get(key, default)


def _split_model_identifier(model: str) -> Tuple[Optional[str], str]:
    """Split ``provider/model`` into its parts; the provider is None when absent."""
    if "/" not in model:
        return None, model
    provider_part, model_part = model.split("/", 1)
    return provider_part.lower(), model_part


def resolve_model_settings() -> ModelSettings:
    """Resolve model, API key and base URL with priority: ENV > Config."""
    config = get_config()
    config_manager = get_config_manager()

    raw_model = config_manager.get_effective_value(config.model.name, MODEL_ENV_VAR)
    provider = config.model.provider.lower()
    explicit_provider, model_name = _split_model_identifier(raw_model)
    if explicit_provider:
        provider = explicit_provider

    same_provider = config.model.provider.lower() == provider
    api_key = config_manager.get_effective_value(
        config.model.api_key if same_provider else None,
        _get_provider_env_var_name(provider),
    )
    base_url = config_manager.get_effective_value(
        config.model.base_url if same_provider else None,
        _get_provider_env_var_name(provider, "base_url"),
    )
    return ModelSettings(model=f"{provider}/{model_name}", api_key=api_key, base_url=base_url)


async def llm_completion(messages: List[Dict[str, str]], model: Optional[str] = None) -> str:
    """
    Make an LLM completion call using the configured provider settings.

    Args:
        messages: List of message dicts with 'role' and 'content' keys
        model: Optional model override. If None, uses configured model.

    Returns:
        The completion response content as string
    """
    settings = resolve_model_settings()

    kwargs = {
        "model": model or settings.model,
        "messages": messages,
    }
    if settings.api_key:
        kwargs["api_key"] = settings.api_key
    if settings.base_url:
        kwargs["base_url"] = settings.base_url

    response = await litellm.acompletion(**kwargs)
    return response.choices[0].message.content or ""


async def complete_with_tools(
    user: str,
    tools: Sequence[ToolDefinition],
    privacy_pairs: PrivacyPairs,
    system: Optional[str] = None,
    model: Optional[str] = None,
) -> Tuple[str, List[ToolCall]]:
    """Prompt the model with tool instructions and decode the tool calls it writes.

    Every message is redacted with ``privacy_pairs`` before it is sent and the
    reply is restored before decoding, so tool parameters carry the original
    strings.

    Returns:
        The restored reply text and the tool calls decoded from it

    Raises:
        XmlExtractionError: The reply contains malformed XML tool tags
    """
    pairs = as_privacy_pairs(privacy_pairs)
    instructions = encode_tools(tools)
    system_prompt = "\n\n".join(part for part in (system, instructions) if part)

    messages = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": user})

    reply = await llm_completion(redact_json(messages, pairs), model=model)
    restored = restore_json(reply, pairs)

    tool_calls = decode_tool_calls(restored, tools)
    logger.debug("Model reply decoded into %d tool call(s)", len(tool_calls))
    return restored, tool_calls
