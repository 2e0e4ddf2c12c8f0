"""Tests for map_json_strings."""

from toolwire.core.json_tree import map_json_strings


class TestMapJsonStrings:
    """Tests for the string-leaf mapper."""

    def test_transforms_top_level_string(self):
        assert map_json_strings("abc", str.upper) == "ABC"

    def test_leaves_scalars_untouched(self):
        for value in (1, 2.5, True, False, None):
            assert map_json_strings(value, str.upper) == value

    def test_keys_unchanged_values_transformed(self):
        value = {"name": "alice", "nested": {"city": "paris", "zip": 75001}}
        result = map_json_strings(value, str.upper)
        assert result == {"name": "ALICE", "nested": {"city": "PARIS", "zip": 75001}}

    def test_lists_keep_order_and_length(self):
        value = ["a", 1, ["b", None], {"k": "c"}]
        result = map_json_strings(value, lambda s: s + "!")
        assert result == ["a!", 1, ["b!", None], {"k": "c!"}]

    def test_input_not_mutated(self):
        value = {"items": ["x", "y"]}
        result = map_json_strings(value, str.upper)
        assert value == {"items": ["x", "y"]}
        assert result is not value
        assert result["items"] is not value["items"]

    def test_empty_containers(self):
        assert map_json_strings({}, str.upper) == {}
        assert map_json_strings([], str.upper) == []
