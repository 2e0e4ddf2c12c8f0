"""Schema-driven extraction of values from XML-style tags in model output.

Model responses are not well-formed XML documents: tags sit between prose,
code and markdown. Only the tags named by the schema are looked for, and
their text is converted according to the schema's type tags.
"""

import logging
import re
from functools import lru_cache
from typing import Any, List, Mapping, Tuple, Union
from xml.sax.saxutils import unescape

from pydantic import JsonValue

from toolwire.core.types import JsonSchema, SchemaType

logger = logging.getLogger(__name__)

# Tag used for list elements when an array is not written as repeated tags
ARRAY_ITEM_TAG = "item"

_ENTITIES = {"&quot;": '"', "&apos;": "'"}
_NUMBER_RE = re.compile(r"-?\d+(?P<fraction>\.\d+)?(?P<exponent>[eE][+-]?\d+)?")
_STRING_SCHEMA = JsonSchema(type=SchemaType.STRING.value)


class XmlExtractionError(ValueError):
    """Raised when tagged text cannot be read against its schema."""


@lru_cache(maxsize=256)
def _tag_pattern(name: str) -> "re.Pattern[str]":
    return re.compile(rf"<(/?){re.escape(name)}\s*(/?)>")


def _find_elements(text: str, name: str) -> List[Tuple[int, str]]:
    """Return ``(offset, inner_text)`` for each outermost ``<name>`` element."""
    elements: List[Tuple[int, str]] = []
    depth = 0
    start = inner_start = 0

    for match in _tag_pattern(name).finditer(text):
        closing, self_closing = match.group(1), match.group(2)
        if closing and self_closing:
            continue

        if self_closing:
            if depth == 0:
                elements.append((match.start(), ""))
            continue

        if not closing:
            if depth == 0:
                start, inner_start = match.start(), match.end()
            depth += 1
            continue

        if depth == 0:
            logger.debug("Ignoring stray </%s> at offset %d", name, match.start())
            continue
        depth -= 1
        if depth == 0:
            elements.append((start, text[inner_start : match.start()]))

    if depth:
        raise XmlExtractionError(f"Unclosed <{name}> tag at offset {start}")
    return elements


def _trim_text(raw: str) -> str:
    """Strip single-line values; drop only the framing line breaks of blocks."""
    if "\n" not in raw:
        return raw.strip()
    text = re.sub(r"\A[ \t]*\r?\n", "", raw, count=1)
    return re.sub(r"\r?\n[ \t]*\Z", "", text, count=1)


def _parse_number(raw: str) -> Union[int, float]:
    text = raw.strip()
    match = _NUMBER_RE.fullmatch(text)
    if not match:
        raise XmlExtractionError(f"Expected a number, got {text!r}")
    if match.group("fraction") or match.group("exponent"):
        return float(text)
    return int(text)


def _parse_boolean(raw: str) -> bool:
    text = raw.strip().lower()
    if text == "true":
        return True
    if text == "false":
        return False
    raise XmlExtractionError(f"Expected true or false, got {raw.strip()!r}")


def _parse_array_elements(inner_texts: List[str], schema: JsonSchema) -> List[JsonValue]:
    item_schema = schema.items or _STRING_SCHEMA
    # <files><item>a</item><item>b</item></files> as well as repeated <files> tags
    if len(inner_texts) == 1:
        nested = _find_elements(inner_texts[0], ARRAY_ITEM_TAG)
        if nested:
            return [_parse_value(inner, item_schema) for _, inner in nested]
    return [_parse_value(inner, item_schema) for inner in inner_texts]


def _parse_object(raw: str, schema: JsonSchema) -> JsonValue:
    result = {}
    for key, sub_schema in (schema.properties or {}).items():
        elements = _find_elements(raw, key)
        if not elements:
            continue
        if sub_schema.type == SchemaType.ARRAY:
            result[key] = _parse_array_elements([inner for _, inner in elements], sub_schema)
        else:
            result[key] = _parse_value(elements[0][1], sub_schema)
    return result


def _parse_value(raw: str, schema: JsonSchema) -> JsonValue:
    kind = schema.type

    if kind == SchemaType.OBJECT:
        return _parse_object(raw, schema)
    if kind == SchemaType.ARRAY:
        item_schema = schema.items or _STRING_SCHEMA
        elements = _find_elements(raw, ARRAY_ITEM_TAG)
        return [_parse_value(inner, item_schema) for _, inner in elements]
    if kind == SchemaType.NUMBER:
        return _parse_number(raw)
    if kind == SchemaType.BOOLEAN:
        return _parse_boolean(raw)
    if kind == SchemaType.NULL:
        return None

    return _trim_text(unescape(raw, _ENTITIES))


def parse_xml_schema(text: str, schema: Union[JsonSchema, Mapping[str, Any]]) -> List[JsonValue]:
    """Extract every match of ``schema`` from ``text``.

    For an object schema, each outermost occurrence of one of its property tags
    is one match, returned as ``{property: value}`` in document order. Any other
    schema reads the whole text as a single value.

    Args:
        text: Model output that may contain tags
        schema: Schema that names the tags and types their content

    Returns:
        List of extracted values

    Raises:
        XmlExtractionError: A declared tag is left open, or its text does not
            fit a number or boolean schema
    """
    schema = JsonSchema.from_value(schema)
    if schema.type != SchemaType.OBJECT:
        return [_parse_value(text, schema)]

    matches: List[Tuple[int, JsonValue]] = []
    for key, sub_schema in (schema.properties or {}).items():
        for offset, inner in _find_elements(text, key):
            matches.append((offset, {key: _parse_value(inner, sub_schema)}))

    matches.sort(key=lambda match: match[0])
    return [value for _, value in matches]
