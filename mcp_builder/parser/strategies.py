"""Extraction strategies that recover a ParsedRecord from a raw model response.

Each strategy turns an arbitrarily formatted response into the fixed record
schema, tolerating malformed or partial input.  Uses pure regex and a small
brace-matching scanner -- no AI calls and no parsing of the generated code
itself.

Strategies:

* :class:`JsonStrategy` -- fenced ``json`` block, then each top-level
  balanced-brace object in the text, then the whole text.
* :class:`MarkdownStrategy` -- level-2 sections and fenced code blocks, with
  generic boilerplate for anything missing.
* :class:`PlainTextStrategy` -- the whole text is server code.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterator
from typing import Any, Optional

from pydantic import ValidationError

from mcp_builder.errors import ParseFailure, SchemaValidationFailure
from mcp_builder.utils import print_info, print_warning

from .models import Language, ParsedRecord


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_JSON_FENCE_PATTERN = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)
_CODE_FENCE_PATTERN = re.compile(r"```([\w+#.-]+)?[^\n]*\n(.*?)```", re.DOTALL)
_FENCE_LINE_PATTERN = re.compile(r"^\s*```")
_HEADER_PATTERN = re.compile(r"^(#{1,6})\s+(.+?)\s*#*\s*$")
_OBJECT_START_PATTERN = re.compile(r"\{\s*\"")
_LOOSE_CODE_PATTERN = re.compile(
    r"^[ \t]*(?:import|from|const|let|function|class|def|async|export)\s+[\s\S]{50,}",
    re.MULTILINE,
)

# Code block tags checked for server code, in priority order.
_SERVER_CODE_TAGS: tuple[str, ...] = (
    "typescript", "ts", "javascript", "js", "python", "py",
)
_UNKNOWN_TAG = "unknown"

_README_SECTIONS = ("readme", "read-me", "overview")
_INSTALL_SECTIONS = ("installation", "setup", "install")
_USAGE_SECTIONS = ("usage", "usage-example", "example", "how-to-use")
_SERVER_SECTIONS = ("server-code", "server")
_FILES_SECTION = "files"

DEFAULT_SERVER_NAME = "MCP Server"
DEFAULT_DESCRIPTION = "A Model Context Protocol server"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def find_json_objects(text: str) -> list[str]:
    """Return each top-level balanced-brace substring that looks like a JSON object.

    A single linear pass tracks the brace depth and where the current
    top-level object opened.  A span is emitted when the depth returns to
    zero, so objects nested inside it are never candidates of their own.  A
    closing brace with nothing open resets the scan.  Only spans starting
    with ``{"`` are kept, which drops code blocks such as ``{ return x; }``.
    """
    objects: list[str] = []
    depth = 0
    start: Optional[int] = None

    for index, char in enumerate(text):
        if char == "{":
            if depth == 0:
                start = index
            depth += 1
        elif char == "}":
            if depth == 0:
                start = None
                continue
            depth -= 1
            if depth == 0 and start is not None:
                if _OBJECT_START_PATTERN.match(text, start):
                    objects.append(text[start:index + 1])
                start = None

    return objects


def extract_code_blocks(text: str) -> dict[str, str]:
    """Map each fenced code block's language tag to its content.

    Untagged blocks are stored under ``"unknown"``.  When a tag occurs more
    than once the first block wins.
    """
    blocks: dict[str, str] = {}
    for match in _CODE_FENCE_PATTERN.finditer(text):
        tag = (match.group(1) or _UNKNOWN_TAG).lower()
        blocks.setdefault(tag, match.group(2).strip())
    return blocks


def normalize_header(title: str) -> str:
    """Normalize a section title: lowercase, whitespace runs become hyphens.

    Examples:
        'Server Code' -> 'server-code'
        'How to   Use:' -> 'how-to-use'
    """
    cleaned = title.strip().rstrip(":").strip().lower()
    return re.sub(r"\s+", "-", cleaned)


def extract_sections(text: str) -> dict[str, str]:
    """Map normalized level-2 header names to their section bodies.

    A section runs until the next level-1 or level-2 header.  Headers inside
    fenced code blocks (e.g. Python comments) are ignored.  The first section
    with a given name wins.
    """
    sections: dict[str, str] = {}
    current: Optional[str] = None
    body_lines: list[str] = []
    in_fence = False

    def _flush() -> None:
        if current is not None:
            sections.setdefault(current, "\n".join(body_lines).strip())

    for line in text.splitlines():
        if _FENCE_LINE_PATTERN.match(line):
            in_fence = not in_fence
        header_match = None if in_fence else _HEADER_PATTERN.match(line)
        if header_match and len(header_match.group(1)) <= 2:
            _flush()
            body_lines = []
            level = len(header_match.group(1))
            current = normalize_header(header_match.group(2)) if level == 2 else None
            continue
        body_lines.append(line)

    _flush()
    return sections


def _first_present(mapping: dict[str, str], keys: tuple[str, ...]) -> str:
    for key in keys:
        value = mapping.get(key, "")
        if value.strip():
            return value
    return ""


def _summarize_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "record"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


# ---------------------------------------------------------------------------
# Boilerplate
# ---------------------------------------------------------------------------

_INSTALL_INSTRUCTIONS: dict[Language, str] = {
    Language.TYPESCRIPT: (
        "1. Install dependencies: `npm install`\n"
        "2. Build the project: `npm run build`\n"
        "3. Configure the server in your MCP client\n"
        "4. Start the server: `npm start`"
    ),
    Language.JAVASCRIPT: (
        "1. Install dependencies: `npm install`\n"
        "2. Configure the server in your MCP client\n"
        "3. Start the server: `npm start`"
    ),
    Language.PYTHON: (
        "1. Install dependencies: `pip install -r requirements.txt`\n"
        "2. Configure the server in your MCP client\n"
        "3. Start the server: `python server.py`"
    ),
}

_INSTALL_COMMANDS: dict[Language, str] = {
    Language.TYPESCRIPT: "npm install\nnpm run build",
    Language.JAVASCRIPT: "npm install",
    Language.PYTHON: "pip install -r requirements.txt",
}

_RUN_COMMANDS: dict[Language, tuple[str, str]] = {
    Language.TYPESCRIPT: ("node", "dist/server.js"),
    Language.JAVASCRIPT: ("node", "server.js"),
    Language.PYTHON: ("python", "server.py"),
}


def basic_install_instructions(language: Language) -> str:
    """Numbered install steps for *language*."""
    return _INSTALL_INSTRUCTIONS[language]


def basic_usage_example(server_name: str, language: Language) -> str:
    """Client configuration snippet that launches the server."""
    command, entry = _RUN_COMMANDS[language]
    config = {"mcpServers": {server_name: {"command": command, "args": [entry]}}}
    return "```json\n" + json.dumps(config, indent=2) + "\n```"


def basic_readme(server_name: str, description: str, language: Language) -> str:
    """Minimal README used when a response carries none."""
    command, entry = _RUN_COMMANDS[language]
    return (
        f"# {server_name}\n\n"
        f"{description}\n\n"
        "## Installation\n\n"
        f"```bash\n{_INSTALL_COMMANDS[language]}\n```\n\n"
        "## Usage\n\n"
        f"```bash\n{command} {entry}\n```\n\n"
        "## Configuration\n\n"
        "Add this server to your MCP client configuration.\n\n"
        "## License\n\n"
        "MIT"
    )


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

class ExtractionStrategy:
    """Base class for all extraction strategies.

    Args:
        language: Target language, used to pick boilerplate for missing
            fields.
        server_name: Name used in synthesized README/usage content.
        description: Description used in a synthesized README.
    """

    name = "base"

    def __init__(
        self,
        language: Language = Language.TYPESCRIPT,
        server_name: str = DEFAULT_SERVER_NAME,
        description: str = DEFAULT_DESCRIPTION,
    ) -> None:
        self.language = language
        self.server_name = server_name
        self.description = description

    def parse(self, text: str) -> ParsedRecord:
        raise NotImplementedError

    def _require_text(self, text: str) -> None:
        if not text or not text.strip():
            raise ParseFailure(self.name, "response is empty")

    def _fill_missing(self, fields: dict[str, Any]) -> ParsedRecord:
        """Synthesize readme/install/usage where *fields* has none."""
        synthesized: set[str] = set()
        if not (fields.get("readme") or "").strip():
            fields["readme"] = basic_readme(self.server_name, self.description, self.language)
            synthesized.add("readme")
        if not (fields.get("install_instructions") or "").strip():
            fields["install_instructions"] = basic_install_instructions(self.language)
            synthesized.add("install_instructions")
        if not (fields.get("usage_example") or "").strip():
            fields["usage_example"] = basic_usage_example(self.server_name, self.language)
            synthesized.add("usage_example")
        return ParsedRecord(**fields).with_synthesized(frozenset(synthesized))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(language={self.language.value!r})"


class JsonStrategy(ExtractionStrategy):
    """Recover the record from a JSON object somewhere in the response.

    Candidates are tried in order -- fenced ``json`` block, each balanced
    brace object, the whole trimmed text -- and the first that decodes to
    an object *and* validates against :class:`ParsedRecord` is returned.
    """

    name = "json"

    def parse(self, text: str) -> ParsedRecord:
        self._require_text(text)
        rejections: list[str] = []

        for origin, candidate in self._candidates(text):
            try:
                data = json.loads(candidate)
            except json.JSONDecodeError as exc:
                if origin == "fenced block":
                    print_warning(f"Failed to parse JSON from code block: {exc}")
                continue
            except RecursionError:
                print_warning(f"Skipping JSON {origin}: nested too deeply to decode")
                continue

            if not isinstance(data, dict):
                rejections.append(f"{origin}: top-level JSON value is not an object")
                continue

            try:
                record = ParsedRecord.model_validate(data)
            except ValidationError as exc:
                reason = f"{origin}: {_summarize_validation_error(exc)}"
                print_info(f"Rejected JSON candidate ({reason})")
                rejections.append(reason)
                continue
            return record

        if rejections:
            raise SchemaValidationFailure(self.name, rejections)
        raise ParseFailure(self.name, "no valid JSON object found in response")

    def _candidates(self, text: str) -> Iterator[tuple[str, str]]:
        seen: set[str] = set()

        def _fresh(candidate: str) -> bool:
            if candidate in seen:
                return False
            seen.add(candidate)
            return True

        fence = _JSON_FENCE_PATTERN.search(text)
        if fence:
            inner = fence.group(1).strip()
            first, last = inner.find("{"), inner.rfind("}")
            if first != -1 and last > first:
                inner = inner[first:last + 1]
            if _fresh(inner):
                yield "fenced block", inner

        for number, candidate in enumerate(find_json_objects(text), start=1):
            if _fresh(candidate):
                yield f"candidate #{number}", candidate

        whole = text.strip()
        if _fresh(whole):
            yield "whole response", whole


class MarkdownStrategy(ExtractionStrategy):
    """Recover the record from markdown sections and fenced code blocks.

    Never fails once non-blank text is supplied: when no server code can be
    located the entire response becomes the server code, and missing prose
    fields are synthesized (and listed in ``ParsedRecord.synthesized``).
    """

    name = "markdown"

    def parse(self, text: str) -> ParsedRecord:
        self._require_text(text)
        code_blocks = extract_code_blocks(text)
        sections = extract_sections(text)

        fields: dict[str, Any] = {
            "server_code": self._resolve_server_code(text, code_blocks, sections),
            "readme": _first_present(sections, _README_SECTIONS),
            "install_instructions": _first_present(sections, _INSTALL_SECTIONS),
            "usage_example": _first_present(sections, _USAGE_SECTIONS),
        }

        files = self._parse_files_section(sections.get(_FILES_SECTION, ""))
        if files:
            fields["additional_files"] = files

        return self._fill_missing(fields)

    def _resolve_server_code(
        self,
        text: str,
        code_blocks: dict[str, str],
        sections: dict[str, str],
    ) -> str:
        server_section = sections.get("server-code", "")
        if server_section:
            embedded = _CODE_FENCE_PATTERN.search(server_section)
            if embedded and embedded.group(2).strip():
                return embedded.group(2).strip()

        sectioned = _first_present(sections, _SERVER_SECTIONS)
        if sectioned:
            return sectioned

        tagged = _first_present(code_blocks, _SERVER_CODE_TAGS)
        if tagged:
            return tagged

        if code_blocks.get(_UNKNOWN_TAG, "").strip():
            return code_blocks[_UNKNOWN_TAG]

        loose = _LOOSE_CODE_PATTERN.search(text)
        if loose:
            return loose.group(0).strip()

        print_info("No code found in markdown response; using the whole response as server code")
        return text

    @staticmethod
    def _parse_files_section(body: str) -> Optional[dict[str, Any]]:
        if not body:
            return None
        fence = _JSON_FENCE_PATTERN.search(body)
        raw = fence.group(1) if fence else body
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, RecursionError):
            print_info("Ignoring 'Files' section: not a JSON object")
            return None
        if not isinstance(data, dict):
            return None
        return {str(path): content for path, content in data.items()}


class PlainTextStrategy(ExtractionStrategy):
    """Treat the whole trimmed response as server code."""

    name = "text"

    def parse(self, text: str) -> ParsedRecord:
        self._require_text(text)
        return self._fill_missing({"server_code": text.strip()})


STRATEGIES: dict[str, type[ExtractionStrategy]] = {
    JsonStrategy.name: JsonStrategy,
    MarkdownStrategy.name: MarkdownStrategy,
    PlainTextStrategy.name: PlainTextStrategy,
}


def get_strategy(name: str, **kwargs: Any) -> ExtractionStrategy:
    """Instantiate a strategy by its registered name.

    Raises:
        ValueError: If *name* is not a registered strategy.
    """
    try:
        strategy_cls = STRATEGIES[name]
    except KeyError:
        known = ", ".join(sorted(STRATEGIES))
        raise ValueError(f"Unknown strategy: {name} (expected one of: {known})") from None
    return strategy_cls(**kwargs)
