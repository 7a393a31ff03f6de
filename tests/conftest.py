"""Shared pytest fixtures for the MCP Server Builder test suite.

Provides reusable fixtures for:
- Generation requests targeting a temporary output directory
- Sample model responses in JSON, markdown and plain-text form
- A fresh template registry
"""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Callable

import pytest

from mcp_builder.parser.models import GenerationRequest, Language, Transport
from mcp_builder.scaffolder.templates import TemplateRegistry


# ---------------------------------------------------------------------------
# Requests & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def make_request(tmp_path: Path) -> Callable[..., GenerationRequest]:
    """Factory for ``GenerationRequest`` objects writing under ``tmp_path``."""

    def _make(
        language: Language = Language.TYPESCRIPT,
        transport: Transport = Transport.STDIO,
        project_name: str = "weather-server",
        description: str = "Look up current weather for a city",
    ) -> GenerationRequest:
        return GenerationRequest(
            description=description,
            language=language,
            transport=transport,
            output_dir=tmp_path / project_name,
            project_name=project_name,
        )

    return _make


@pytest.fixture
def registry() -> TemplateRegistry:
    """A freshly built registry of the built-in templates."""
    return TemplateRegistry()


# ---------------------------------------------------------------------------
# Sample responses
# ---------------------------------------------------------------------------

SAMPLE_TS_CODE = textwrap.dedent("""\
    const tools = [
      {
        name: 'get_weather',
        description: 'Get current weather for a city',
        inputSchema: {
          type: 'object',
          properties: { city: { type: 'string' } },
          required: ['city'],
        },
        handler: async (args: any) => ({
          content: [{ type: 'text', text: `Sunny in ${args.city}` }],
        }),
      },
    ];""")


@pytest.fixture
def sample_ts_code() -> str:
    return SAMPLE_TS_CODE


@pytest.fixture
def json_response() -> str:
    """A well-formed response: one fenced ``json`` block with prose around it."""
    payload = {
        "serverCode": SAMPLE_TS_CODE,
        "readme": "# Weather Server\n\nFetches the weather.",
        "installInstructions": "npm install && npm run build",
        "usageExample": "Ask: what's the weather in Paris?",
        "dependencies": {"node-fetch": "^3.3.0"},
        "devDependencies": {"vitest": "^1.0.0"},
        "scripts": {"test": "vitest"},
        "additionalFiles": {"src/weather.ts": "export const unit = 'C';\n"},
    }
    return (
        "Here is your server:\n\n"
        "```json\n" + json.dumps(payload, indent=2) + "\n```\n\n"
        "Let me know if you need changes."
    )


@pytest.fixture
def markdown_response() -> str:
    """A mixed markdown response with sections and a tagged code block."""
    return textwrap.dedent("""\
        # Weather Server

        ## Overview

        An MCP server that reports the weather.

        ## Server Code

        ```typescript
        const tools = [];
        // resources and prompts are not used here
        ```

        ## Installation

        Run `npm install`.

        ## Usage

        Start the server and ask for a forecast.
        """)


@pytest.fixture
def plain_response() -> str:
    return "import { Server } from '@modelcontextprotocol/sdk/server/index.js';\nconst x = 1;"
