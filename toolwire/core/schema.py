"""Structural validation of JSON values against a minimal schema."""

from typing import Any, Mapping, Union

from pydantic import JsonValue

from toolwire.core.types import JsonSchema, SchemaType

# Stands in for a property that is not present in the validated object
_MISSING = object()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _validate_object(value: Any, schema: JsonSchema) -> bool:
    if not isinstance(value, dict):
        return False

    # Every declared property is checked, including absent ones, which never match
    for key, sub_schema in (schema.properties or {}).items():
        if not _validate(value.get(key, _MISSING), sub_schema):
            return False

    for required_key in schema.required or []:
        if required_key not in value:
            return False

    return True


def _validate(value: Any, schema: JsonSchema) -> bool:
    kind = schema.type

    if kind == SchemaType.STRING:
        return isinstance(value, str)
    if kind == SchemaType.NUMBER:
        return _is_number(value)
    if kind == SchemaType.BOOLEAN:
        return isinstance(value, bool)
    if kind == SchemaType.NULL:
        return value is None
    if kind == SchemaType.OBJECT:
        return _validate_object(value, schema)
    if kind == SchemaType.ARRAY:
        # Element shapes are not checked against ``items``
        return isinstance(value, (list, tuple))

    return False


def validate_json_against_schema(
    value: JsonValue, schema: Union[JsonSchema, Mapping[str, Any]]
) -> bool:
    """Check that ``value`` has the shape described by ``schema``.

    Primitive types must match exactly, without coercion. Objects must contain
    every declared property with a matching value and every ``required`` key;
    undeclared keys are accepted. Arrays only need to be sequences. Unknown or
    missing type tags fail validation.

    Args:
        value: JSON value to check
        schema: Schema model or its dict form

    Returns:
        True if the value conforms
    """
    return _validate(value, JsonSchema.from_value(schema))
