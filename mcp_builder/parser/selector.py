"""Pick the extraction strategy for a raw response.

The decision is a single pass of cheap textual checks -- nothing is parsed
before a strategy is chosen, and exactly one strategy is used per response.
"""

from __future__ import annotations

import re

from mcp_builder.utils import print_info

from .models import Language, ParsedRecord
from .strategies import (
    DEFAULT_DESCRIPTION,
    DEFAULT_SERVER_NAME,
    ExtractionStrategy,
    JsonStrategy,
    MarkdownStrategy,
    PlainTextStrategy,
)

_WHOLE_OBJECT_PATTERN = re.compile(r"\s*\{.*\}\s*", re.DOTALL)
_SECTION_HEADER_PATTERN = re.compile(r"^[ \t]*##+[ \t]+\S", re.MULTILINE)


def select_strategy(
    text: str,
    language: Language = Language.TYPESCRIPT,
    server_name: str = DEFAULT_SERVER_NAME,
    description: str = DEFAULT_DESCRIPTION,
) -> ExtractionStrategy:
    """Return the strategy best suited to *text*.

    Priority order:

    1. A fenced ``json`` block, or the whole text is one ``{...}`` object
       -> :class:`JsonStrategy`.
    2. Markdown section headers or any fenced code block
       -> :class:`MarkdownStrategy`.
    3. Anything else -> :class:`PlainTextStrategy`.
    """
    kwargs = {"language": language, "server_name": server_name, "description": description}

    if "```json" in text.lower() or _WHOLE_OBJECT_PATTERN.fullmatch(text):
        return JsonStrategy(**kwargs)
    if _SECTION_HEADER_PATTERN.search(text) or "```" in text:
        return MarkdownStrategy(**kwargs)
    return PlainTextStrategy(**kwargs)


def parse_response(
    text: str,
    language: Language = Language.TYPESCRIPT,
    server_name: str = DEFAULT_SERVER_NAME,
    description: str = DEFAULT_DESCRIPTION,
) -> ParsedRecord:
    """Select a strategy for *text* and parse it.

    Raises:
        ParseFailure: If the selected strategy recovers nothing usable.
    """
    strategy = select_strategy(text, language, server_name, description)
    print_info(f"Parsing response with the {strategy.name} strategy")
    return strategy.parse(text)
