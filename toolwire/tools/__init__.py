"""Tool selection and execution."""

from toolwire.tools.executor import execute_tool_calls, filter_tools_by_name

__all__ = ["execute_tool_calls", "filter_tools_by_name"]
