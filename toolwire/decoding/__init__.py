"""Decoders turning model output into tool calls."""

from toolwire.decoding.decoders import (
    decode_backtick_tool_calls,
    decode_json_tool_calls,
    decode_tool_calls,
    decode_xml_tool_calls,
)
from toolwire.decoding.fenced_files import DEFAULT_FILE_TYPE_MAP, extract_files_from_response
from toolwire.decoding.xml_extract import XmlExtractionError, parse_xml_schema

__all__ = [
    "DEFAULT_FILE_TYPE_MAP",
    "XmlExtractionError",
    "decode_backtick_tool_calls",
    "decode_json_tool_calls",
    "decode_tool_calls",
    "decode_xml_tool_calls",
    "extract_files_from_response",
    "parse_xml_schema",
]
