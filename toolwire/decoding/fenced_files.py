"""Extract ``path -> content`` pairs from fenced code blocks in model output."""

import logging
import re
from typing import Dict, Mapping, Optional

logger = logging.getLogger(__name__)

# Fence language -> file type. A language mapped to None is excluded.
DEFAULT_FILE_TYPE_MAP: Dict[str, Optional[str]] = {
    "bash": "shell",
    "c": "c",
    "commit": "commit",
    "cpp": "cpp",
    "css": "css",
    "diff": "diff",
    "go": "go",
    "html": "html",
    "java": "java",
    "javascript": "javascript",
    "js": "javascript",
    "json": "json",
    "jsx": "javascript",
    "markdown": "markdown",
    "md": "markdown",
    "py": "python",
    "python": "python",
    "rs": "rust",
    "rust": "rust",
    "sh": "shell",
    "sql": "sql",
    "toml": "toml",
    "ts": "typescript",
    "tsx": "typescript",
    "typescript": "typescript",
    "xml": "xml",
    "yaml": "yaml",
    "yml": "yaml",
}

_FENCE_RE = re.compile(
    r"^(?P<fence>`{3,})(?P<info>[^`\n]*)\n(?P<body>.*?)^(?P=fence)[ \t]*$",
    re.DOTALL | re.MULTILINE,
)
_PATH_TOKEN_RE = re.compile(r"[\w@~.\-\\]*[/.\\][\w@~./\-\\]*\w")
_PATH_COMMENT_RE = re.compile(
    r"^[ \t]*(?://|#|--|;|/\*|<!--)[ \t]*(?P<path>\S+?)[ \t]*(?:\*/|-->)?[ \t]*$"
)
_HEADER_RE = re.compile(
    r"^[ \t]*(?:#{1,6}[ \t]+|(?:File|Path|Filename):[ \t]*)?[*`]*(?P<path>[^\s*`]+?)[*`:]*[ \t]*$",
    re.IGNORECASE,
)


def _looks_like_path(token: str) -> bool:
    return bool(_PATH_TOKEN_RE.fullmatch(token))


def _path_from_info(tokens: list) -> Optional[str]:
    for token in tokens:
        if _looks_like_path(token):
            return token
    return None


def _path_from_header(preceding: str) -> Optional[str]:
    lines = preceding.rstrip("\n").split("\n")
    if not lines:
        return None
    last = lines[-1]
    # A bare word on the line before a fence is usually prose, so require decoration
    if not re.search(r"[*`#:]", last):
        return None
    match = _HEADER_RE.match(last)
    if match and _looks_like_path(match.group("path")):
        return match.group("path")
    return None


def _normalize_path(path: str, path_rules: Mapping[str, str]) -> str:
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    for prefix in sorted(path_rules, key=len, reverse=True):
        if path.startswith(prefix):
            return path_rules[prefix] + path[len(prefix) :]
    return path


def extract_files_from_response(
    response: str,
    path_rules: Optional[Mapping[str, str]] = None,
    type_map: Optional[Mapping[str, Optional[str]]] = None,
) -> Dict[str, str]:
    """Collect files written as fenced code blocks.

    The path of a block is taken from its info string (```` ```py src/a.py ````),
    from a path comment on its first line (``// src/a.ts``), or from a
    decorated header on the line just before it (``**src/a.ts**``). Blocks
    whose language maps to None in ``type_map`` and blocks without a path are
    skipped.

    Args:
        response: Model output
        path_rules: Path prefix rewrites, longest prefix first
        type_map: Fence language -> file type; None excludes the language

    Returns:
        Mapping of path to content, in the order paths first appear
    """
    path_rules = path_rules or {}
    type_map = DEFAULT_FILE_TYPE_MAP if type_map is None else type_map
    files: Dict[str, str] = {}

    for match in _FENCE_RE.finditer(response):
        tokens = match.group("info").split()
        language = tokens[0].lower() if tokens else ""
        if language in type_map and type_map[language] is None:
            logger.debug("Skipping excluded %s block", language)
            continue

        body = match.group("body")
        path = _path_from_info(tokens)
        if path is None:
            first_line, _, rest = body.partition("\n")
            comment = _PATH_COMMENT_RE.match(first_line)
            if comment and _looks_like_path(comment.group("path")):
                path, body = comment.group("path"), rest
        if path is None:
            path = _path_from_header(response[: match.start()])
        if path is None:
            logger.debug("Skipping fenced block without a path at offset %d", match.start())
            continue

        files[_normalize_path(path, path_rules)] = body

    return files
