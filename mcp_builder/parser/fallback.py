"""Canned response used when a model response cannot be parsed.

The builder core never falls back on its own; a caller that catches
``ParseFailure`` may feed :func:`build_fallback_response` through the normal
pipeline instead, which yields a small but runnable echo-tool server.
"""

from __future__ import annotations

import json

from .models import GenerationRequest, Language
from .strategies import basic_usage_example

_ECHO_TOOL_CODE: dict[Language, str] = {
    Language.TYPESCRIPT: """\
const tools = [
  {
    name: 'echo',
    description: 'Echo the provided message back to the caller',
    inputSchema: {
      type: 'object',
      properties: {
        message: { type: 'string', description: 'Message to echo' },
      },
      required: ['message'],
    },
    handler: async (args: any) => ({
      content: [{ type: 'text', text: String(args?.message ?? '') }],
    }),
  },
];""",
    Language.JAVASCRIPT: """\
const tools = [
  {
    name: 'echo',
    description: 'Echo the provided message back to the caller',
    inputSchema: {
      type: 'object',
      properties: {
        message: { type: 'string', description: 'Message to echo' },
      },
      required: ['message'],
    },
    handler: async (args) => ({
      content: [{ type: 'text', text: String(args?.message ?? '') }],
    }),
  },
];""",
    Language.PYTHON: """\
async def _echo(arguments: Dict[str, Any]) -> List[TextContent]:
    return [TextContent(type="text", text=str(arguments.get("message", "")))]


tools = [
    {
        "name": "echo",
        "description": "Echo the provided message back to the caller",
        "inputSchema": {
            "type": "object",
            "properties": {
                "message": {"type": "string", "description": "Message to echo"},
            },
            "required": ["message"],
        },
        "handler": _echo,
    }
]""",
}

_FALLBACK_INSTALL: dict[Language, str] = {
    Language.TYPESCRIPT: (
        "1. Install dependencies: `npm install`\n"
        "2. Build the project: `npm run build`\n"
        "3. Start the server: `npm start`"
    ),
    Language.JAVASCRIPT: (
        "1. Install dependencies: `npm install`\n"
        "2. Start the server: `npm start`"
    ),
    Language.PYTHON: (
        "1. Create a virtual environment: `python -m venv .venv`\n"
        "2. Activate it: `source .venv/bin/activate` (Windows: `.venv\\Scripts\\activate`)\n"
        "3. Install dependencies: `pip install -r requirements.txt`\n"
        "4. Start the server: `python server.py`"
    ),
}


def build_fallback_response(request: GenerationRequest) -> str:
    """Return a JSON response document for a minimal echo-tool server.

    The document follows the same schema a model is asked to produce, so it
    parses with the JSON strategy and flows through the normal builders.
    """
    payload = {
        "serverCode": _ECHO_TOOL_CODE[request.language],
        "readme": (
            f"# {request.project_name}\n\n"
            f"{request.description}\n\n"
            "This project was generated from a fallback template because the "
            "model response could not be used. It exposes a single `echo` tool."
        ),
        "installInstructions": _FALLBACK_INSTALL[request.language],
        "usageExample": basic_usage_example(request.project_name, request.language),
    }
    return json.dumps(payload, indent=2)
