"""Vendor-agnostic data model for tools, tool calls and privacy pairs.

Tool definitions declare how a tool is encoded in a model response (``json``,
``xml`` or ``backtick``). Tool calls are immutable values; payload fields that
were never provided stay absent, which is tracked through pydantic's
``model_fields_set`` rather than a ``None`` placeholder.
"""

from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, JsonValue

StringTransform = Callable[[str], str]


class SchemaType(str, Enum):
    """Type tags understood by the schema validator and the XML extractor."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    NULL = "null"


class ToolFormat(str, Enum):
    """How a tool call is written inside a model response."""

    JSON = "json"
    XML = "xml"
    BACKTICK = "backtick"


class JsonSchema(BaseModel):
    """Minimal structural schema.

    ``type`` is the discriminant. It is kept as a plain string so that a schema
    with an unknown or missing tag can still be loaded; validation then fails
    instead of raising. ``enum``, ``format``, ``description`` and ``example``
    are documentation only.
    """

    model_config = ConfigDict(extra="allow")

    type: Optional[str] = None
    properties: Optional[Dict[str, "JsonSchema"]] = None
    items: Optional["JsonSchema"] = None
    required: Optional[List[str]] = None
    enum: Optional[List[Any]] = None
    format: Optional[str] = None
    description: Optional[str] = None
    example: Optional[Any] = None

    @classmethod
    def from_value(cls, value: Union["JsonSchema", Mapping[str, Any]]) -> "JsonSchema":
        if isinstance(value, cls):
            return value
        return cls.model_validate(value)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


JsonSchema.model_rebuild()


class ToolDefinition(BaseModel):
    """A tool the model may call, and the format it is expected to use."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    type: ToolFormat
    description: Optional[str] = None
    parameters: Optional[JsonSchema] = None
    response: Optional[JsonSchema] = None
    function: Optional[Callable[..., Any]] = Field(default=None, exclude=True)


class ToolCall(BaseModel):
    """A structured invocation decoded from model output."""

    model_config = ConfigDict(frozen=True)

    type: Optional[ToolFormat] = None
    name: str
    parameters: Optional[JsonValue] = None
    response: Optional[JsonValue] = None

    def has(self, field: str) -> bool:
        """Return True if ``field`` was explicitly provided."""
        return field in self.model_fields_set

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


class ToolCallResult(ToolCall):
    """A tool call after execution; ``error`` is set when execution failed."""

    error: Optional[str] = None


class PrivacyPair(BaseModel):
    """Literal search/replace rule used to mask a private string."""

    model_config = ConfigDict(frozen=True)

    search: str
    replace: str


def as_privacy_pairs(
    pairs: Iterable[Union[PrivacyPair, Mapping[str, str]]],
) -> Tuple[PrivacyPair, ...]:
    """Snapshot ``pairs`` into an immutable tuple, keeping their order."""
    return tuple(PrivacyPair.model_validate(pair) for pair in pairs)


def as_tool_definitions(
    tools: Iterable[Union[ToolDefinition, Mapping[str, Any]]],
) -> List[ToolDefinition]:
    return [ToolDefinition.model_validate(tool) for tool in tools]
