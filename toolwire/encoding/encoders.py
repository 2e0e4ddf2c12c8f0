"""Prompt encoders for tool definitions and completed tool calls.

Each format has three encoders: instructions for a single tool, instructions
for a list of tools, and a rendering of completed calls (parameters merged
with the response) used when re-prompting the model with results.
"""

import json
from typing import Any, Dict, Iterable, List, Sequence

from toolwire.core.types import JsonSchema, ToolCall, ToolDefinition, ToolFormat
from toolwire.encoding.xml import to_xml

FORMAT_INSTRUCTION = "Use this format for this tool:\n"
JSON_ARRAY_INSTRUCTION = "Reply with only a JSON array of tool calls, like this:\n"

# Shown when a backtick tool declares no parameters
_DEFAULT_BACKTICK_HEADER = "// path/to/file"


def _properties(tool: ToolDefinition) -> Dict[str, JsonSchema]:
    if tool.parameters is None:
        return {}
    return tool.parameters.properties or {}


def _as_mapping(value: Any) -> Dict[str, Any]:
    return dict(value) if isinstance(value, dict) else {}


def _parameter_hints(tool: ToolDefinition) -> Dict[str, str]:
    return {
        key: schema.description or schema.type or "value"
        for key, schema in _properties(tool).items()
    }


# =============================================================================
# XML
# =============================================================================


def encode_tool_to_xml(tool: ToolDefinition) -> str:
    fields = {
        key: f"{schema.type} - {schema.description or 'value'}"
        for key, schema in _properties(tool).items()
    }
    return FORMAT_INSTRUCTION + to_xml(fields, tool.name)


def encode_tools_to_xml(tools: Iterable[ToolDefinition]) -> str:
    return "\n\n".join(encode_tool_to_xml(tool) for tool in tools)


def encode_tool_calls_with_results_to_xml(calls: Iterable[ToolCall]) -> str:
    return "\n\n".join(
        to_xml({**_as_mapping(call.parameters), **_as_mapping(call.response)}, call.name)
        for call in calls
    )


# =============================================================================
# JSON
# =============================================================================


def encode_tool_to_json(tool: ToolDefinition) -> str:
    sample = {"name": tool.name, "parameters": _parameter_hints(tool)}
    return FORMAT_INSTRUCTION + json.dumps(sample, indent=2)


def encode_tools_to_json(tools: Iterable[ToolDefinition]) -> str:
    samples = [{"name": tool.name, "parameters": _parameter_hints(tool)} for tool in tools]
    return json.dumps(samples, indent=2)


def encode_tool_calls_with_results_to_json(calls: Iterable[ToolCall]) -> str:
    entries = []
    for call in calls:
        entry: Dict[str, Any] = {"name": call.name, "parameters": call.parameters or {}}
        if call.has("response"):
            entry["response"] = call.response
        entries.append(entry)
    return json.dumps(entries, indent=2)


# =============================================================================
# BACKTICK
# =============================================================================


def _backtick_header(tool: ToolDefinition) -> str:
    lines = [
        f"// {schema.example if schema.example is not None else key}"
        for key, schema in _properties(tool).items()
        if key != "content"
    ]
    return "\n".join(lines) if lines else _DEFAULT_BACKTICK_HEADER


def encode_tool_to_backtick(tool: ToolDefinition) -> str:
    block = f"```\n{_backtick_header(tool)}\ncontent\n```"
    return f"Output separately like this:\n\n{block}\n\n{block}"


def encode_tools_to_backtick(tools: Iterable[ToolDefinition]) -> str:
    return "\n\n".join(encode_tool_to_backtick(tool) for tool in tools)


def encode_tool_calls_with_results_to_backtick(calls: Iterable[ToolCall]) -> str:
    blocks = []
    for call in calls:
        merged = {"content": "", **_as_mapping(call.parameters), **_as_mapping(call.response)}
        content = str(merged.pop("content"))
        header = "\n".join(f"// {value}" for value in merged.values())
        if not content.endswith("\n"):
            content += "\n"
        blocks.append(f"```\n{header}\n{content}```")
    return "\n\n".join(blocks)


# =============================================================================
# ALL FORMATS
# =============================================================================


def _group_by_format(tools: Iterable[ToolDefinition]) -> Dict[ToolFormat, List[ToolDefinition]]:
    groups: Dict[ToolFormat, List[ToolDefinition]] = {fmt: [] for fmt in ToolFormat}
    for tool in tools:
        groups[tool.type].append(tool)
    return groups


def encode_tools(tools: Sequence[ToolDefinition]) -> str:
    """Instructions for every tool, grouped by format (json, xml, backtick)."""
    groups = _group_by_format(tools)
    sections = []
    if groups[ToolFormat.JSON]:
        sections.append(JSON_ARRAY_INSTRUCTION + encode_tools_to_json(groups[ToolFormat.JSON]))
    if groups[ToolFormat.XML]:
        sections.append(encode_tools_to_xml(groups[ToolFormat.XML]))
    if groups[ToolFormat.BACKTICK]:
        sections.append(encode_tools_to_backtick(groups[ToolFormat.BACKTICK]))
    return "\n\n".join(sections)


def encode_tool_calls_with_results(calls: Sequence[ToolCall]) -> str:
    """Render completed calls, each in the format it was decoded from.

    Calls without a format (decoded from a JSON array) are rendered as JSON.
    """
    json_calls = [call for call in calls if call.type in (None, ToolFormat.JSON)]
    xml_calls = [call for call in calls if call.type == ToolFormat.XML]
    backtick_calls = [call for call in calls if call.type == ToolFormat.BACKTICK]

    sections = []
    if json_calls:
        sections.append(encode_tool_calls_with_results_to_json(json_calls))
    if xml_calls:
        sections.append(encode_tool_calls_with_results_to_xml(xml_calls))
    if backtick_calls:
        sections.append(encode_tool_calls_with_results_to_backtick(backtick_calls))
    return "\n\n".join(sections)
