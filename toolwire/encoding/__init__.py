"""Render tool instructions and tool results into prompt text."""

from toolwire.encoding.encoders import (
    encode_tool_calls_with_results,
    encode_tool_calls_with_results_to_backtick,
    encode_tool_calls_with_results_to_json,
    encode_tool_calls_with_results_to_xml,
    encode_tool_to_backtick,
    encode_tool_to_json,
    encode_tool_to_xml,
    encode_tools,
    encode_tools_to_backtick,
    encode_tools_to_json,
    encode_tools_to_xml,
)
from toolwire.encoding.xml import escape_xml, to_xml

__all__ = [
    "encode_tool_calls_with_results",
    "encode_tool_calls_with_results_to_backtick",
    "encode_tool_calls_with_results_to_json",
    "encode_tool_calls_with_results_to_xml",
    "encode_tool_to_backtick",
    "encode_tool_to_json",
    "encode_tool_to_xml",
    "encode_tools",
    "encode_tools_to_backtick",
    "encode_tools_to_json",
    "encode_tools_to_xml",
    "escape_xml",
    "to_xml",
]
