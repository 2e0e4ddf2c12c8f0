"""Command-line interface for toolwire."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .config import ConfigError, get_config
from .core.privacy import redact_json, restore_json
from .core.schema import validate_json_against_schema
from .core.types import JsonSchema, ToolDefinition, as_tool_definitions
from .decoding import XmlExtractionError, decode_tool_calls
from .encoding import encode_tools

console = Console()
logger = logging.getLogger(__name__)


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _load_structured(source: str) -> Any:
    """Load a YAML or JSON document (YAML is a superset of JSON)."""
    return yaml.safe_load(_read_input(source))


def _load_tools(source: Optional[str]) -> List[ToolDefinition]:
    if source is None:
        return list(get_config().tools)
    data = _load_structured(source)
    if isinstance(data, dict):
        data = data.get("tools", [])
    return as_tool_definitions(data or [])


def _print_json(value: Any) -> None:
    console.print_json(json.dumps(value, ensure_ascii=False))


def _error(message: str) -> int:
    console.print(Panel(Text(message, style="red"), title="❌ Error", border_style="red"))
    return 1


def _cmd_decode(args: argparse.Namespace) -> int:
    tools = _load_tools(args.tools)
    calls = decode_tool_calls(_read_input(args.response), tools)
    _print_json([call.to_dict() for call in calls])
    return 0


def _cmd_redact(args: argparse.Namespace) -> int:
    document = json.loads(_read_input(args.file))
    _print_json(redact_json(document, get_config().privacy))
    return 0


def _cmd_restore(args: argparse.Namespace) -> int:
    document = json.loads(_read_input(args.file))
    _print_json(restore_json(document, get_config().privacy))
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    document = json.loads(_read_input(args.file))
    schema = JsonSchema.from_value(_load_structured(args.schema))
    if validate_json_against_schema(document, schema):
        console.print("[green]valid[/green]")
        return 0
    console.print("[red]invalid[/red]")
    return 1


def _cmd_encode(args: argparse.Namespace) -> int:
    console.print(encode_tools(_load_tools(args.tools)), markup=False, highlight=False)
    return 0


def _cmd_ask(args: argparse.Namespace) -> int:
    from .utils.client import complete_with_tools

    tools = _load_tools(args.tools)
    reply, calls = asyncio.run(
        complete_with_tools(args.prompt, tools, get_config().privacy, system=args.system)
    )
    console.print(Panel(Text(reply), title="Assistant", border_style="blue"))
    _print_json([call.to_dict() for call in calls])
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toolwire", description="Decode LLM tool calls and mask private strings"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    decode_parser = subparsers.add_parser("decode", help="Decode tool calls from a response")
    decode_parser.add_argument("response", help="Response text file, or - for stdin")
    decode_parser.add_argument("--tools", help="YAML/JSON tool definitions (default: config)")
    decode_parser.set_defaults(handler=_cmd_decode)

    redact_parser = subparsers.add_parser("redact", help="Mask a JSON document")
    redact_parser.add_argument("file", help="JSON file, or - for stdin")
    redact_parser.set_defaults(handler=_cmd_redact)

    restore_parser = subparsers.add_parser("restore", help="Unmask a JSON document")
    restore_parser.add_argument("file", help="JSON file, or - for stdin")
    restore_parser.set_defaults(handler=_cmd_restore)

    validate_parser = subparsers.add_parser("validate", help="Check JSON against a schema")
    validate_parser.add_argument("file", help="JSON file, or - for stdin")
    validate_parser.add_argument("--schema", required=True, help="YAML/JSON schema file")
    validate_parser.set_defaults(handler=_cmd_validate)

    encode_parser = subparsers.add_parser("encode", help="Print tool instructions for a prompt")
    encode_parser.add_argument("--tools", help="YAML/JSON tool definitions (default: config)")
    encode_parser.set_defaults(handler=_cmd_encode)

    ask_parser = subparsers.add_parser("ask", help="Prompt the configured model with tools")
    ask_parser.add_argument("prompt", help="User prompt")
    ask_parser.add_argument("--system", default=None, help="System prompt")
    ask_parser.add_argument("--tools", help="YAML/JSON tool definitions (default: config)")
    ask_parser.set_defaults(handler=_cmd_ask)

    return parser


def _setup_logging(verbose: bool) -> None:
    try:
        level = get_config().logging.level
    except ConfigError:
        level = "WARNING"
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "handler", None):
        parser.print_help()
        return 1

    _setup_logging(args.verbose)
    try:
        return args.handler(args)
    except XmlExtractionError as e:
        return _error(f"Malformed tool call tags: {e}")
    except ConfigError as e:
        return _error(str(e))
    except (OSError, ValueError, ValidationError, yaml.YAMLError) as e:
        return _error(f"{type(e).__name__}: {e}")


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
