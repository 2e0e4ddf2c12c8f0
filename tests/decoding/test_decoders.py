"""Tests for the tool call decoders."""

import json

import pytest

from toolwire.core.types import ToolCall, ToolDefinition, ToolFormat
from toolwire.decoding import (
    XmlExtractionError,
    decode_backtick_tool_calls,
    decode_json_tool_calls,
    decode_tool_calls,
    decode_xml_tool_calls,
)

READ_FILE_XML = ToolDefinition(
    name="readFile",
    type=ToolFormat.XML,
    parameters={"type": "object", "properties": {"path": {"type": "string"}}},
)
WRITE_FILE_BACKTICK = ToolDefinition(name="writeFile", type=ToolFormat.BACKTICK)


class TestDecodeJsonToolCalls:
    """Tests for the JSON array decoder."""

    def test_decodes_every_element(self):
        calls = [
            {"name": "readFile", "parameters": {"path": "a.txt"}},
            {"name": "unknownTool", "parameters": {"x": [1, 2]}},
        ]
        result = decode_json_tool_calls(json.dumps(calls), [])
        assert [call.to_dict() for call in result] == calls

    def test_type_is_absent(self):
        result = decode_json_tool_calls('[{"name": "a", "parameters": {}}]', [])
        assert not result[0].has("type")
        assert "type" not in result[0].to_dict()

    def test_missing_parameters_become_empty_mapping(self):
        result = decode_json_tool_calls('[{"name": "a"}, {"name": "b", "parameters": null}]', [])
        assert [call.parameters for call in result] == [{}, {}]

    @pytest.mark.parametrize(
        "response",
        [
            '[{"name": "a", "parameters": {',
            '{"name": "a", "parameters": {}}',
            '"just a string"',
            "Sure! Here is the call: []",
            "",
        ],
    )
    def test_non_array_or_malformed_yields_nothing(self, response):
        assert decode_json_tool_calls(response, []) == []

    def test_null_element_rejects_whole_array(self):
        assert decode_json_tool_calls('[{"name": "a"}, null]', []) == []

    def test_elements_without_name_are_skipped(self):
        response = '[{"name": "a"}, {"parameters": {}}, 3, {"name": 7}, {"name": "b"}]'
        result = decode_json_tool_calls(response, [])
        assert [call.name for call in result] == ["a", "b"]

    def test_unparseably_deep_nesting_yields_nothing(self):
        assert decode_json_tool_calls("[" * 100000, []) == []
        assert decode_tool_calls("[" * 100000, []) == []

    def test_deeply_nested_parameters_yield_nothing(self):
        response = '[{"name": "a", "parameters": {"x": ' + "[" * 300 + "]" * 300 + "}}]"
        assert decode_json_tool_calls(response, []) == []

    def test_empty_array(self):
        assert decode_json_tool_calls("[]", []) == []


class TestDecodeXmlToolCalls:
    """Tests for the schema-driven XML decoder."""

    def test_single_call(self):
        result = decode_xml_tool_calls("<readFile><path>a.txt</path></readFile>", [READ_FILE_XML])
        assert result == [
            ToolCall(type=ToolFormat.XML, name="readFile", parameters={"path": "a.txt"})
        ]

    def test_tools_without_schema_are_skipped(self):
        tool = ToolDefinition(name="readFile", type=ToolFormat.XML)
        assert decode_xml_tool_calls("<readFile><path>a</path></readFile>", [tool]) == []

    def test_results_follow_definition_order(self):
        list_dir = ToolDefinition(
            name="listDir",
            type=ToolFormat.XML,
            parameters={"type": "object", "properties": {"dir": {"type": "string"}}},
        )
        response = "<readFile><path>a</path></readFile><listDir><dir>src</dir></listDir>"
        result = decode_xml_tool_calls(response, [list_dir, READ_FILE_XML])
        assert [call.name for call in result] == ["listDir", "readFile"]

    def test_non_mapping_matches_are_dropped(self):
        def extractor(text, schema):
            return [["array"], {"other": {}}, {"readFile": "text"}, {"readFile": {"path": "a"}}]

        result = decode_xml_tool_calls("ignored", [READ_FILE_XML], extractor=extractor)
        assert [call.parameters for call in result] == [{"path": "a"}]

    def test_extractor_receives_wrapper_schema(self):
        seen = []

        def extractor(text, schema):
            seen.append(schema.to_dict())
            return []

        decode_xml_tool_calls("text", [READ_FILE_XML], extractor=extractor)
        assert seen == [
            {
                "type": "object",
                "properties": {
                    "readFile": {"type": "object", "properties": {"path": {"type": "string"}}}
                },
            }
        ]

    def test_extractor_errors_propagate(self):
        with pytest.raises(XmlExtractionError):
            decode_xml_tool_calls("<readFile><path>a</path>", [READ_FILE_XML])


class TestDecodeBacktickToolCalls:
    """Tests for the fenced block decoder."""

    RESPONSE = "```ts\n// src/a.ts\nconst a = 1;\n```\n\n```ts\n// src/b.ts\nconst b = 2;\n```\n"

    def test_one_call_per_file(self):
        result = decode_backtick_tool_calls(self.RESPONSE, [WRITE_FILE_BACKTICK])
        assert [call.to_dict() for call in result] == [
            {
                "type": "backtick",
                "name": "writeFile",
                "parameters": {"path": "src/a.ts", "content": "const a = 1;\n"},
            },
            {
                "type": "backtick",
                "name": "writeFile",
                "parameters": {"path": "src/b.ts", "content": "const b = 2;\n"},
            },
        ]

    def test_no_tool_no_calls(self):
        assert decode_backtick_tool_calls(self.RESPONSE, []) == []

    def test_unnamed_tool_no_calls(self):
        unnamed = ToolDefinition(name="", type=ToolFormat.BACKTICK)
        assert decode_backtick_tool_calls(self.RESPONSE, [unnamed, WRITE_FILE_BACKTICK]) == []

    def test_first_tool_name_is_used(self):
        other = ToolDefinition(name="createFile", type=ToolFormat.BACKTICK)
        result = decode_backtick_tool_calls(self.RESPONSE, [other, WRITE_FILE_BACKTICK])
        assert {call.name for call in result} == {"createFile"}

    def test_commit_blocks_are_excluded(self):
        response = "```commit\n# a.txt\nfeat: add a\n```"
        assert decode_backtick_tool_calls(response, [WRITE_FILE_BACKTICK]) == []

    def test_extractor_arguments(self):
        seen = []

        def extractor(text, path_rules, type_map):
            seen.append((path_rules, type_map["commit"]))
            return {"x.txt": "x"}

        result = decode_backtick_tool_calls("t", [WRITE_FILE_BACKTICK], extractor=extractor)
        assert seen == [({}, None)]
        assert result[0].parameters == {"path": "x.txt", "content": "x"}


class TestDecodeToolCalls:
    """Tests for the format dispatcher."""

    def test_order_is_json_then_xml_then_backtick(self):
        response = (
            "```\n// notes.txt\nhi\n```\n"
            "<readFile><path>a.txt</path></readFile>"
        )
        tools = [WRITE_FILE_BACKTICK, READ_FILE_XML]
        result = decode_tool_calls(response, tools)
        assert [(call.type, call.name) for call in result] == [
            (ToolFormat.XML, "readFile"),
            (ToolFormat.BACKTICK, "writeFile"),
        ]

    def test_json_decoded_without_json_tools(self):
        result = decode_tool_calls('[{"name": "anything", "parameters": {"a": 1}}]', [])
        assert [call.to_dict() for call in result] == [
            {"name": "anything", "parameters": {"a": 1}}
        ]

    def test_accepts_dict_definitions(self):
        tools = [
            {
                "name": "readFile",
                "type": "xml",
                "parameters": {"type": "object", "properties": {"path": {"type": "string"}}},
            }
        ]
        result = decode_tool_calls("<readFile><path>a.txt</path></readFile>", tools)
        assert result[0].to_dict() == {
            "type": "xml",
            "name": "readFile",
            "parameters": {"path": "a.txt"},
        }

    def test_xml_errors_propagate(self):
        with pytest.raises(XmlExtractionError):
            decode_tool_calls("<readFile>", [READ_FILE_XML, WRITE_FILE_BACKTICK])

    def test_custom_extractors(self):
        def xml_extractor(text, schema):
            return [{"readFile": {"path": "from-xml"}}]

        def file_extractor(text, path_rules, type_map):
            return {"from-files": "c"}

        result = decode_tool_calls(
            "text",
            [READ_FILE_XML, WRITE_FILE_BACKTICK],
            xml_extractor=xml_extractor,
            file_extractor=file_extractor,
        )
        assert [call.parameters for call in result] == [
            {"path": "from-xml"},
            {"path": "from-files", "content": "c"},
        ]

    def test_nothing_found(self):
        assert decode_tool_calls("plain text", [READ_FILE_XML, WRITE_FILE_BACKTICK]) == []
