"""Run decoded tool calls against their tool definitions."""

import json
import logging
from typing import Iterable, List, Sequence

from pydantic import ValidationError

from toolwire.core.schema import validate_json_against_schema
from toolwire.core.types import ToolCall, ToolCallResult, ToolDefinition

logger = logging.getLogger(__name__)


def filter_tools_by_name(
    tools: Iterable[ToolDefinition], names: Iterable[str]
) -> List[ToolDefinition]:
    """Keep the tools whose name is listed, in the order of ``tools``."""
    wanted = set(names)
    return [tool for tool in tools if tool.name in wanted]


def _result(call: ToolCall, **update) -> ToolCallResult:
    fields = {field: getattr(call, field) for field in call.model_fields_set}
    fields.update(update)
    return ToolCallResult(**fields)


def _execute_one(call: ToolCall, tools_by_name: dict) -> ToolCallResult:
    tool = tools_by_name.get(call.name)
    if tool is None:
        return _result(call, error=f"Unknown tool: {call.name}")

    if tool.function is None:
        return _result(call)

    if tool.parameters is not None and call.has("parameters"):
        if not validate_json_against_schema(call.parameters, tool.parameters):
            schema = json.dumps(tool.parameters.to_dict())
            return _result(
                call, error=f"Tool call arguments for {call.name} do not match schema: {schema}"
            )

    logger.info("Calling tool %s", call.name)
    try:
        response = tool.function(call.parameters)
    except Exception as e:
        logger.warning("Tool %s failed: %s", call.name, e)
        return _result(call, error=str(e) or "Tool execution failed")

    if tool.response is not None and not validate_json_against_schema(response, tool.response):
        schema = json.dumps(tool.response.to_dict())
        return _result(
            call, error=f"Function response for {call.name} does not match schema: {schema}"
        )

    try:
        return _result(call, response=response)
    except ValidationError:
        return _result(call, error=f"Function {call.name} returned a value that is not JSON")


def execute_tool_calls(
    calls: Sequence[ToolCall], tools: Sequence[ToolDefinition]
) -> List[ToolCallResult]:
    """Execute each call with the ``function`` of the matching tool.

    Failures never abort the batch: unknown tools, schema mismatches and
    exceptions raised by the function are reported in ``error`` on the
    call's result. Results keep the order of ``calls``.

    Args:
        calls: Decoded tool calls
        tools: Available tool definitions

    Returns:
        One result per call
    """
    tools_by_name = {}
    for tool in tools:
        tools_by_name.setdefault(tool.name, tool)
    return [_execute_one(call, tools_by_name) for call in calls]
