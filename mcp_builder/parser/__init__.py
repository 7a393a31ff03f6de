"""MCP Server Builder response parser.

Recovers a structured record (server code, README, install instructions,
dependencies, extra files) from a loosely formatted model response.

Usage::

    from mcp_builder.parser import parse_response, Language

    record = parse_response(raw_text, language=Language.PYTHON)
    print(record.server_code)
    print(record.synthesized)
"""

from mcp_builder.parser.models import (
    GenerationRequest,
    Language,
    ParsedRecord,
    Transport,
)
from mcp_builder.parser.selector import parse_response, select_strategy
from mcp_builder.parser.strategies import (
    JsonStrategy,
    MarkdownStrategy,
    PlainTextStrategy,
    get_strategy,
)

__all__ = [
    "parse_response",
    "select_strategy",
    "get_strategy",
    "JsonStrategy",
    "MarkdownStrategy",
    "PlainTextStrategy",
    "GenerationRequest",
    "Language",
    "ParsedRecord",
    "Transport",
]
