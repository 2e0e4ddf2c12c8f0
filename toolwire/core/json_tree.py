"""Apply a string transform to every string leaf of a JSON value."""

from pydantic import JsonValue

from toolwire.core.types import StringTransform


def map_json_strings(value: JsonValue, transform: StringTransform) -> JsonValue:
    """Return a copy of ``value`` with every string leaf passed through ``transform``.

    Mapping keys are left untouched, sequences keep their order and length, and
    numbers, booleans and ``None`` are returned as they are.

    Args:
        value: Any JSON-like value
        transform: Function applied to each string leaf

    Returns:
        A new value with the same shape as ``value``
    """
    if isinstance(value, str):
        return transform(value)

    if isinstance(value, list):
        return [map_json_strings(item, transform) for item in value]

    if isinstance(value, tuple):
        return tuple(map_json_strings(item, transform) for item in value)

    if isinstance(value, dict):
        return {key: map_json_strings(item, transform) for key, item in value.items()}

    return value
