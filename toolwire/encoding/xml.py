"""Recursive XML rendering of JSON values."""

from typing import Any, Optional
from xml.sax.saxutils import escape

from pydantic import JsonValue

_QUOTE_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_xml(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return escape(str(value), _QUOTE_ENTITIES)


def to_xml(data: JsonValue, tag_name: Optional[str] = None) -> str:
    """Render ``data`` as XML.

    Lists repeat ``tag_name`` (``item`` when none is given) once per element,
    dicts nest one child tag per key, and None renders as an empty tag.
    """
    if data is None:
        return f"<{tag_name}/>" if tag_name else ""

    if isinstance(data, (list, tuple)):
        return "\n".join(to_xml(item, tag_name or "item") for item in data)

    if isinstance(data, dict):
        children = "\n".join(to_xml(value, key) for key, value in data.items())
        if not tag_name:
            return children
        return f"<{tag_name}>\n{children}\n</{tag_name}>"

    text = escape_xml(data)
    return f"<{tag_name}>{text}</{tag_name}>" if tag_name else text
