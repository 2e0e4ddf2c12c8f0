"""Decode tool calls from model responses.

Three formats are supported, each selected by the ``type`` of a tool
definition:

- ``json``: the whole response is a JSON array of ``{name, parameters}``
- ``xml``: ``<ToolName><field>value</field></ToolName>`` shaped by the tool schema
- ``backtick``: fenced code blocks naming a file path, attributed to one tool

Results are concatenated in that fixed order, whatever their position in the
response text.
"""

import json
import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from pydantic import JsonValue, ValidationError

from toolwire.core.types import (
    JsonSchema,
    SchemaType,
    ToolCall,
    ToolDefinition,
    ToolFormat,
    as_tool_definitions,
)
from toolwire.decoding.fenced_files import DEFAULT_FILE_TYPE_MAP, extract_files_from_response
from toolwire.decoding.xml_extract import parse_xml_schema

logger = logging.getLogger(__name__)

TagExtractor = Callable[[str, JsonSchema], List[JsonValue]]
FileExtractor = Callable[
    [str, Mapping[str, str], Mapping[str, Optional[str]]], Mapping[str, str]
]
ToolDefinitions = Iterable[Union[ToolDefinition, Mapping[str, Any]]]

# Commit message blocks are never files
BACKTICK_FILE_TYPE_MAP: Dict[str, Optional[str]] = {**DEFAULT_FILE_TYPE_MAP, "commit": None}


def _json_parameters(element: Mapping[str, Any]) -> JsonValue:
    parameters = element.get("parameters")
    # Falsy scalars and a missing key all mean "no parameters"
    if parameters or isinstance(parameters, (dict, list)):
        return parameters
    return {}


def decode_json_tool_calls(response: str, tools: Sequence[ToolDefinition]) -> List[ToolCall]:
    """Decode a response that is entirely one JSON array of tool calls.

    Tool names are not checked against ``tools``. Elements without a string
    ``name`` are skipped. Anything that is not a JSON array, an array holding a
    null element, or nesting too deep to parse yields an empty list.
    """
    try:
        document = json.loads(response)
    except (ValueError, RecursionError):
        return []

    if not isinstance(document, list):
        return []

    calls: List[ToolCall] = []
    for element in document:
        if element is None:
            logger.debug("JSON tool call array has a null element, ignoring response")
            return []
        if not isinstance(element, dict) or not isinstance(element.get("name"), str):
            logger.debug("Skipping JSON tool call without a name")
            continue
        call_name = element["name"]
        try:
            call = ToolCall(name=call_name, parameters=_json_parameters(element))
        except ValidationError:
            logger.debug("JSON tool call %s is nested too deeply, ignoring response", call_name)
            return []
        calls.append(call)
    return calls


def decode_xml_tool_calls(
    response: str,
    tools: Sequence[ToolDefinition],
    extractor: TagExtractor = parse_xml_schema,
) -> List[ToolCall]:
    """Decode ``<ToolName>...</ToolName>`` calls for each tool with a schema.

    Errors raised by ``extractor`` are not caught.
    """
    calls: List[ToolCall] = []
    for tool in tools:
        if tool.parameters is None:
            continue

        wrapper = JsonSchema(
            type=SchemaType.OBJECT.value,
            properties={tool.name: tool.parameters},
        )
        for match in extractor(response, wrapper):
            parameters = match.get(tool.name) if isinstance(match, dict) else None
            if not isinstance(parameters, dict):
                logger.debug("Dropping XML match without %s parameters", tool.name)
                continue
            calls.append(ToolCall(type=ToolFormat.XML, name=tool.name, parameters=parameters))
    return calls


def decode_backtick_tool_calls(
    response: str,
    tools: Sequence[ToolDefinition],
    extractor: FileExtractor = extract_files_from_response,
) -> List[ToolCall]:
    """Decode fenced file blocks as calls to the first backtick tool.

    Every extracted file is attributed to the same tool name. Without a named
    tool the result is empty, even if the response contains fenced blocks.
    """
    name = tools[0].name if tools else ""
    if not name:
        return []

    files = extractor(response, {}, BACKTICK_FILE_TYPE_MAP)
    return [
        ToolCall(
            type=ToolFormat.BACKTICK,
            name=name,
            parameters={"path": path, "content": content},
        )
        for path, content in files.items()
    ]


def _decode_json(response: str, tools: Sequence[ToolDefinition], **_: Any) -> List[ToolCall]:
    return decode_json_tool_calls(response, tools)


def _decode_xml(
    response: str,
    tools: Sequence[ToolDefinition],
    xml_extractor: TagExtractor = parse_xml_schema,
    **_: Any,
) -> List[ToolCall]:
    return decode_xml_tool_calls(response, tools, extractor=xml_extractor)


def _decode_backtick(
    response: str,
    tools: Sequence[ToolDefinition],
    file_extractor: FileExtractor = extract_files_from_response,
    **_: Any,
) -> List[ToolCall]:
    return decode_backtick_tool_calls(response, tools, extractor=file_extractor)


# Dispatch order is the output order
_DECODERS = (
    (ToolFormat.JSON, _decode_json),
    (ToolFormat.XML, _decode_xml),
    (ToolFormat.BACKTICK, _decode_backtick),
)


def decode_tool_calls(
    response: str,
    tools: ToolDefinitions,
    xml_extractor: TagExtractor = parse_xml_schema,
    file_extractor: FileExtractor = extract_files_from_response,
) -> List[ToolCall]:
    """Decode every tool call in ``response``.

    Tool definitions are grouped by format and each group goes to its decoder.
    JSON calls come first, then XML, then backtick calls.

    Args:
        response: Model output text
        tools: Tool definitions (models or dicts)
        xml_extractor: Tag extractor used for ``xml`` tools
        file_extractor: Fenced block extractor used for ``backtick`` tools

    Returns:
        Decoded tool calls

    Raises:
        XmlExtractionError: The tag extractor rejected the response
    """
    definitions = as_tool_definitions(tools)
    by_format: Dict[ToolFormat, List[ToolDefinition]] = {fmt: [] for fmt, _ in _DECODERS}
    for tool in definitions:
        by_format[tool.type].append(tool)

    calls: List[ToolCall] = []
    for fmt, decoder in _DECODERS:
        decoded = decoder(
            response,
            by_format[fmt],
            xml_extractor=xml_extractor,
            file_extractor=file_extractor,
        )
        logger.debug("Decoded %d %s tool call(s)", len(decoded), fmt.value)
        calls.extend(decoded)
    return calls
