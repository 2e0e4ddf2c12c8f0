"""Reversible literal substitution for masking private strings.

``redact`` applies the pairs in list order, each one on the output of the one
before, so replacements may cascade. ``restore`` walks the list backwards and
swaps each ``replace`` for its ``search``. The two are inverses only when no
``replace`` text already occurs in the content or is produced by another
pair, and no ``search`` is a substring of another pair's ``search`` or
``replace``. That is left to whoever writes the pairs.
"""

from functools import partial
from typing import Iterable, List, Mapping, Sequence, Union

from pydantic import JsonValue

from toolwire.core.json_tree import map_json_strings
from toolwire.core.types import PrivacyPair, StringTransform, ToolCall, as_privacy_pairs

PrivacyPairs = Iterable[Union[PrivacyPair, Mapping[str, str]]]

_PAYLOAD_FIELDS = ("parameters", "response")


def apply_privacy_replacements(content: str, pairs: Sequence[PrivacyPair]) -> str:
    """Replace every literal ``search`` with its ``replace``, pair by pair."""
    for pair in pairs:
        content = content.replace(pair.search, pair.replace)
    return content


def reverse_privacy_replacements(content: str, pairs: Sequence[PrivacyPair]) -> str:
    """Undo :func:`apply_privacy_replacements` by walking the pairs in reverse."""
    for pair in reversed(pairs):
        content = content.replace(pair.replace, pair.search)
    return content


def redact_json(value: JsonValue, pairs: PrivacyPairs) -> JsonValue:
    return map_json_strings(
        value, partial(apply_privacy_replacements, pairs=as_privacy_pairs(pairs))
    )


def restore_json(value: JsonValue, pairs: PrivacyPairs) -> JsonValue:
    return map_json_strings(
        value, partial(reverse_privacy_replacements, pairs=as_privacy_pairs(pairs))
    )


def _transform_tool_call(call: ToolCall, transform: StringTransform) -> ToolCall:
    update = {
        field: map_json_strings(getattr(call, field), transform)
        for field in _PAYLOAD_FIELDS
        if call.has(field)
    }
    return call.model_copy(update=update)


def redact_tool_call(call: ToolCall, pairs: PrivacyPairs) -> ToolCall:
    """Mask ``parameters`` and ``response`` of a tool call.

    Absent payload fields stay absent. The input call is not modified.
    """
    transform = partial(apply_privacy_replacements, pairs=as_privacy_pairs(pairs))
    return _transform_tool_call(call, transform)


def restore_tool_call(call: ToolCall, pairs: PrivacyPairs) -> ToolCall:
    """Unmask ``parameters`` and ``response`` of a tool call."""
    transform = partial(reverse_privacy_replacements, pairs=as_privacy_pairs(pairs))
    return _transform_tool_call(call, transform)


def redact_tool_calls(calls: Iterable[ToolCall], pairs: PrivacyPairs) -> List[ToolCall]:
    snapshot = as_privacy_pairs(pairs)
    return [redact_tool_call(call, snapshot) for call in calls]


def restore_tool_calls(calls: Iterable[ToolCall], pairs: PrivacyPairs) -> List[ToolCall]:
    snapshot = as_privacy_pairs(pairs)
    return [restore_tool_call(call, snapshot) for call in calls]
