"""Tool call decoding and privacy masking for LLM responses."""

from toolwire.core.privacy import (
    redact_json,
    redact_tool_call,
    restore_json,
    restore_tool_call,
)
from toolwire.core.schema import validate_json_against_schema
from toolwire.core.types import (
    JsonSchema,
    PrivacyPair,
    SchemaType,
    ToolCall,
    ToolCallResult,
    ToolDefinition,
    ToolFormat,
)
from toolwire.decoding import XmlExtractionError, decode_tool_calls

__version__ = "0.1.0"

__all__ = [
    "JsonSchema",
    "PrivacyPair",
    "SchemaType",
    "ToolCall",
    "ToolCallResult",
    "ToolDefinition",
    "ToolFormat",
    "XmlExtractionError",
    "decode_tool_calls",
    "redact_json",
    "redact_tool_call",
    "restore_json",
    "restore_tool_call",
    "validate_json_against_schema",
]
