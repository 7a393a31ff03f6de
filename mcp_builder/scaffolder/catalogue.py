"""Template bodies for generated MCP server entry files.

Pure data: one entry-file body per language x category, assembled from
shared fragments, plus the per-transport import and start-up blocks.  Bodies
use ``{{ NAME }}`` placeholders rendered by
:class:`mcp_builder.scaffolder.templates.TemplateRegistry`.
"""

from __future__ import annotations

import textwrap

from mcp_builder.parser.models import Language, Transport

from .models import TemplateCategory

# ---------------------------------------------------------------------------
# Placeholders
# ---------------------------------------------------------------------------

BASE_VARIABLES: tuple[str, ...] = (
    "SERVER_NAME",
    "DESCRIPTION",
    "SERVER_CODE",
    "TRANSPORT_IMPORTS",
    "BOOTSTRAP",
)

CATEGORY_VARIABLES: dict[TemplateCategory, tuple[str, ...]] = {
    TemplateCategory.BASIC: (),
    TemplateCategory.TOOLS: ("TOOLS",),
    TemplateCategory.RESOURCES: ("RESOURCES",),
    TemplateCategory.PROMPTS: ("PROMPTS",),
    TemplateCategory.ADVANCED: ("TOOLS", "RESOURCES", "PROMPTS", "CUSTOM_CODE"),
}

# Leftover markers for these render as empty strings; any other leftover is
# replaced with a visible comment.
OPTIONAL_VARIABLES: frozenset[str] = frozenset(
    {"TOOLS", "RESOURCES", "PROMPTS", "CUSTOM_CODE", "USAGE_EXAMPLE"}
)

PLACEHOLDER_COMMENTS: dict[Language, str] = {
    Language.TYPESCRIPT: "/* TODO: Replace {name} */",
    Language.JAVASCRIPT: "/* TODO: Replace {name} */",
    Language.PYTHON: "# TODO: Replace {name}",
}

LANGUAGE_LABELS: dict[Language, str] = {
    Language.TYPESCRIPT: "TypeScript",
    Language.JAVASCRIPT: "JavaScript",
    Language.PYTHON: "Python",
}

CATEGORY_DESCRIPTIONS: dict[TemplateCategory, str] = {
    TemplateCategory.BASIC: "{language} MCP server with minimal setup",
    TemplateCategory.TOOLS: "{language} MCP server focused on providing tools",
    TemplateCategory.RESOURCES: "{language} MCP server focused on providing resources",
    TemplateCategory.PROMPTS: "{language} MCP server focused on providing prompts",
    TemplateCategory.ADVANCED: "{language} MCP server with tools, resources, and prompts",
}


# ---------------------------------------------------------------------------
# Node (TypeScript / JavaScript) fragments
# ---------------------------------------------------------------------------

_NODE_SCHEMAS: dict[TemplateCategory, tuple[str, ...]] = {
    TemplateCategory.BASIC: (
        "CallToolRequestSchema", "ErrorCode", "ListToolsRequestSchema", "McpError",
    ),
    TemplateCategory.TOOLS: (
        "CallToolRequestSchema", "ErrorCode", "ListToolsRequestSchema", "McpError",
    ),
    TemplateCategory.RESOURCES: (
        "ListResourcesRequestSchema", "ReadResourceRequestSchema", "ErrorCode", "McpError",
    ),
    TemplateCategory.PROMPTS: (
        "ListPromptsRequestSchema", "GetPromptRequestSchema", "ErrorCode", "McpError",
    ),
    TemplateCategory.ADVANCED: (
        "CallToolRequestSchema", "ListToolsRequestSchema",
        "ListResourcesRequestSchema", "ReadResourceRequestSchema",
        "ListPromptsRequestSchema", "GetPromptRequestSchema",
        "ErrorCode", "McpError",
    ),
}

_NODE_EXAMPLE_TOOL = """\
// List available tools
server.setRequestHandler(ListToolsRequestSchema, async () => {
  return {
    tools: [
      {
        name: 'example_tool',
        description: 'An example tool that demonstrates the basic structure',
        inputSchema: {
          type: 'object',
          properties: {
            message: {
              type: 'string',
              description: 'A message to process',
            },
          },
          required: ['message'],
        },
      },
    ],
  };
});

// Handle tool calls
server.setRequestHandler(CallToolRequestSchema, async (request) => {
  const { name, arguments: args } = request.params;

  try {
    switch (name) {
      case 'example_tool':
        return {
          content: [
            {
              type: 'text',
              text: `Processed message: ${args.message}`,
            },
          ],
        };

      default:
        throw new McpError(ErrorCode.MethodNotFound, `Unknown tool: ${name}`);
    }
  } catch (error) {
    if (error instanceof McpError) {
      throw error;
    }
    throw new McpError(ErrorCode.InternalError, `Tool execution failed: ${error instanceof Error ? error.message : 'Unknown error'}`);
  }
});
"""

_NODE_TOOL_HANDLERS = """\
// List available tools
server.setRequestHandler(ListToolsRequestSchema, async () => {
  return {
    tools: tools.map(tool => ({
      name: tool.name,
      description: tool.description,
      inputSchema: tool.inputSchema,
    })),
  };
});

// Handle tool calls
server.setRequestHandler(CallToolRequestSchema, async (request) => {
  const { name, arguments: args } = request.params;

  try {
    const tool = tools.find(t => t.name === name);
    if (!tool) {
      throw new McpError(ErrorCode.MethodNotFound, `Unknown tool: ${name}`);
    }

    return await tool.handler(args);
  } catch (error) {
    if (error instanceof McpError) {
      throw error;
    }
    throw new McpError(ErrorCode.InternalError, `Tool execution failed: ${error instanceof Error ? error.message : 'Unknown error'}`);
  }
});
"""

_NODE_RESOURCE_HANDLERS = """\
// List available resources
server.setRequestHandler(ListResourcesRequestSchema, async () => {
  return {
    resources: resources.map(resource => ({
      uri: resource.uri,
      name: resource.name,
      description: resource.description,
      mimeType: resource.mimeType,
    })),
  };
});

// Read resource content
server.setRequestHandler(ReadResourceRequestSchema, async (request) => {
  const { uri } = request.params;

  try {
    const resource = resources.find(r => r.uri === uri);
    if (!resource) {
      throw new McpError(ErrorCode.InvalidRequest, `Resource not found: ${uri}`);
    }

    return {
      contents: [
        {
          uri,
          mimeType: resource.mimeType,
          text: await resource.getContent(),
        },
      ],
    };
  } catch (error) {
    if (error instanceof McpError) {
      throw error;
    }
    throw new McpError(ErrorCode.InternalError, `Failed to read resource: ${error instanceof Error ? error.message : 'Unknown error'}`);
  }
});
"""

_NODE_PROMPT_HANDLERS = """\
// List available prompts
server.setRequestHandler(ListPromptsRequestSchema, async () => {
  return {
    prompts: prompts.map(prompt => ({
      name: prompt.name,
      description: prompt.description,
      arguments: prompt.arguments,
    })),
  };
});

// Get prompt content
server.setRequestHandler(GetPromptRequestSchema, async (request) => {
  const { name, arguments: args } = request.params;

  try {
    const prompt = prompts.find(p => p.name === name);
    if (!prompt) {
      throw new McpError(ErrorCode.InvalidRequest, `Prompt not found: ${name}`);
    }

    return await prompt.getContent(args);
  } catch (error) {
    if (error instanceof McpError) {
      throw error;
    }
    throw new McpError(ErrorCode.InternalError, `Failed to get prompt: ${error instanceof Error ? error.message : 'Unknown error'}`);
  }
});
"""


# ---------------------------------------------------------------------------
# Python fragments
# ---------------------------------------------------------------------------

_PYTHON_TYPES: dict[TemplateCategory, tuple[str, ...]] = {
    TemplateCategory.BASIC: ("Tool", "TextContent"),
    TemplateCategory.TOOLS: ("Tool", "TextContent"),
    TemplateCategory.RESOURCES: ("Resource",),
    TemplateCategory.PROMPTS: ("Prompt", "GetPromptResult"),
    TemplateCategory.ADVANCED: ("Tool", "Resource", "Prompt", "TextContent", "GetPromptResult"),
}

_PYTHON_EXAMPLE_TOOL = '''\
@server.list_tools()
async def handle_list_tools() -> List[Tool]:
    """List available tools."""
    return [
        Tool(
            name="example_tool",
            description="An example tool that demonstrates the basic structure",
            inputSchema={
                "type": "object",
                "properties": {
                    "message": {
                        "type": "string",
                        "description": "A message to process",
                    },
                },
                "required": ["message"],
            },
        )
    ]


@server.call_tool()
async def handle_call_tool(name: str, arguments: Dict[str, Any]) -> List[TextContent]:
    """Handle tool calls."""
    if name == "example_tool":
        return [TextContent(type="text", text=f"Processed message: {arguments['message']}")]
    raise ValueError(f"Unknown tool: {name}")
'''

_PYTHON_TOOL_HANDLERS = '''\
@server.list_tools()
async def handle_list_tools() -> List[Tool]:
    """List available tools."""
    return [
        Tool(
            name=tool["name"],
            description=tool["description"],
            inputSchema=tool["inputSchema"],
        )
        for tool in tools
    ]


@server.call_tool()
async def handle_call_tool(name: str, arguments: Dict[str, Any]) -> List[TextContent]:
    """Handle tool calls."""
    tool = next((t for t in tools if t["name"] == name), None)
    if tool is None:
        raise ValueError(f"Unknown tool: {name}")
    return await tool["handler"](arguments)
'''

_PYTHON_RESOURCE_HANDLERS = '''\
@server.list_resources()
async def handle_list_resources() -> List[Resource]:
    """List available resources."""
    return [
        Resource(
            uri=resource["uri"],
            name=resource["name"],
            description=resource["description"],
            mimeType=resource["mimeType"],
        )
        for resource in resources
    ]


@server.read_resource()
async def handle_read_resource(uri: Any) -> str:
    """Read resource content."""
    resource = next((r for r in resources if r["uri"] == str(uri)), None)
    if resource is None:
        raise ValueError(f"Resource not found: {uri}")
    return await resource["getContent"]()
'''

_PYTHON_PROMPT_HANDLERS = '''\
@server.list_prompts()
async def handle_list_prompts() -> List[Prompt]:
    """List available prompts."""
    return [
        Prompt(
            name=prompt["name"],
            description=prompt["description"],
            arguments=prompt["arguments"],
        )
        for prompt in prompts
    ]


@server.get_prompt()
async def handle_get_prompt(name: str, arguments: Dict[str, Any]) -> GetPromptResult:
    """Get prompt content."""
    prompt = next((p for p in prompts if p["name"] == name), None)
    if prompt is None:
        raise ValueError(f"Prompt not found: {name}")
    return await prompt["getContent"](arguments)
'''


# ---------------------------------------------------------------------------
# Transport blocks
# ---------------------------------------------------------------------------

TRANSPORT_IMPORTS: dict[tuple[Language, Transport], str] = {
    (Language.TYPESCRIPT, Transport.STDIO): (
        "import { StdioServerTransport } from '@modelcontextprotocol/sdk/server/stdio.js';"
    ),
    (Language.TYPESCRIPT, Transport.SSE): (
        "import express from 'express';\n"
        "import { SSEServerTransport } from '@modelcontextprotocol/sdk/server/sse.js';"
    ),
    (Language.JAVASCRIPT, Transport.STDIO): (
        "import { StdioServerTransport } from '@modelcontextprotocol/sdk/server/stdio.js';"
    ),
    (Language.JAVASCRIPT, Transport.SSE): (
        "import express from 'express';\n"
        "import { SSEServerTransport } from '@modelcontextprotocol/sdk/server/sse.js';"
    ),
    (Language.PYTHON, Transport.STDIO): "from mcp.server.stdio import stdio_server",
    (Language.PYTHON, Transport.SSE): (
        "import os\n\n"
        "import uvicorn\n"
        "from mcp.server.sse import SseServerTransport\n"
        "from starlette.applications import Starlette\n"
        "from starlette.routing import Mount, Route"
    ),
}

_NODE_STDIO_BOOTSTRAP = """\
async function main() {
  const transport = new StdioServerTransport();
  await server.connect(transport);
  console.error('{{ SERVER_NAME }} MCP server running on {{ TRANSPORT }}');
}

main().catch((error) => {
  console.error('Server failed to start:', error);
  process.exit(1);
});"""

_NODE_SSE_BOOTSTRAP = """\
const app = express();
let transport{{ TRANSPORT_TYPE }};

app.get('/sse', async (req, res) => {
  transport = new SSEServerTransport('/messages', res);
  await server.connect(transport);
});

app.post('/messages', async (req, res) => {
  if (!transport) {
    res.status(503).send('No active SSE connection');
    return;
  }
  await transport.handlePostMessage(req, res);
});

const port = Number(process.env.PORT ?? 3001);
app.listen(port, () => {
  console.error(`{{ SERVER_NAME }} MCP server running on SSE at http://localhost:${port}/sse`);
});"""

_PYTHON_STDIO_BOOTSTRAP = '''\
async def main():
    """Run the server over stdio."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


if __name__ == "__main__":
    asyncio.run(main())'''

_PYTHON_SSE_BOOTSTRAP = '''\
def main() -> None:
    """Run the server over SSE."""
    sse = SseServerTransport("/messages/")

    async def handle_sse(request):
        async with sse.connect_sse(request.scope, request.receive, request._send) as streams:
            await server.run(streams[0], streams[1], server.create_initialization_options())

    app = Starlette(
        routes=[
            Route("/sse", endpoint=handle_sse),
            Mount("/messages/", app=sse.handle_post_message),
        ]
    )
    print("{{ SERVER_NAME }} MCP server running on SSE", file=sys.stderr)
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "8000")))


if __name__ == "__main__":
    main()'''

# Rendered with the entry-file variables before being inserted as BOOTSTRAP.
BOOTSTRAPS: dict[tuple[Language, Transport], str] = {
    (Language.TYPESCRIPT, Transport.STDIO): _NODE_STDIO_BOOTSTRAP,
    (Language.TYPESCRIPT, Transport.SSE): _NODE_SSE_BOOTSTRAP.replace(
        "{{ TRANSPORT_TYPE }}", ": SSEServerTransport | undefined"
    ),
    (Language.JAVASCRIPT, Transport.STDIO): _NODE_STDIO_BOOTSTRAP,
    (Language.JAVASCRIPT, Transport.SSE): _NODE_SSE_BOOTSTRAP.replace("{{ TRANSPORT_TYPE }}", ""),
    (Language.PYTHON, Transport.STDIO): _PYTHON_STDIO_BOOTSTRAP,
    (Language.PYTHON, Transport.SSE): _PYTHON_SSE_BOOTSTRAP,
}


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------

def _category_slots(category: TemplateCategory) -> str:
    slots = [v for v in CATEGORY_VARIABLES[category] if v != "CUSTOM_CODE"]
    return "\n".join("{{" + name + "}}" for name in slots)


def _node_body(category: TemplateCategory) -> str:
    schemas = ",\n".join(f"  {name}" for name in _NODE_SCHEMAS[category])
    capabilities = {
        TemplateCategory.BASIC: ("tools",),
        TemplateCategory.TOOLS: ("tools",),
        TemplateCategory.RESOURCES: ("resources",),
        TemplateCategory.PROMPTS: ("prompts",),
        TemplateCategory.ADVANCED: ("tools", "resources", "prompts"),
    }[category]
    capability_lines = "\n".join(f"      {name}: {{}}," for name in capabilities)
    handlers = {
        TemplateCategory.BASIC: [_NODE_EXAMPLE_TOOL],
        TemplateCategory.TOOLS: [_NODE_TOOL_HANDLERS],
        TemplateCategory.RESOURCES: [_NODE_RESOURCE_HANDLERS],
        TemplateCategory.PROMPTS: [_NODE_PROMPT_HANDLERS],
        TemplateCategory.ADVANCED: [
            _NODE_TOOL_HANDLERS, _NODE_RESOURCE_HANDLERS, _NODE_PROMPT_HANDLERS,
        ],
    }[category]

    parts = [
        "import { Server } from '@modelcontextprotocol/sdk/server/index.js';\n"
        "{{TRANSPORT_IMPORTS}}\n"
        "import {\n"
        f"{schemas},\n"
        "} from '@modelcontextprotocol/sdk/types.js';",
        "/**\n * {{DESCRIPTION}}\n */",
        "{{SERVER_CODE}}",
        "const server = new Server(\n"
        "  {\n"
        "    name: '{{SERVER_NAME}}',\n"
        "    version: '1.0.0',\n"
        "  },\n"
        "  {\n"
        "    capabilities: {\n"
        f"{capability_lines}\n"
        "    },\n"
        "  }\n"
        ");",
    ]
    slots = _category_slots(category)
    if slots:
        parts.append(slots)
    parts.extend(h.rstrip("\n") for h in handlers)
    if "CUSTOM_CODE" in CATEGORY_VARIABLES[category]:
        parts.append("{{CUSTOM_CODE}}")
    parts.append("{{BOOTSTRAP}}")
    return "\n\n".join(parts) + "\n"


def _python_body(category: TemplateCategory) -> str:
    handlers = {
        TemplateCategory.BASIC: [_PYTHON_EXAMPLE_TOOL],
        TemplateCategory.TOOLS: [_PYTHON_TOOL_HANDLERS],
        TemplateCategory.RESOURCES: [_PYTHON_RESOURCE_HANDLERS],
        TemplateCategory.PROMPTS: [_PYTHON_PROMPT_HANDLERS],
        TemplateCategory.ADVANCED: [
            _PYTHON_TOOL_HANDLERS, _PYTHON_RESOURCE_HANDLERS, _PYTHON_PROMPT_HANDLERS,
        ],
    }[category]

    header = textwrap.dedent('''\
        #!/usr/bin/env python3
        """
        {{SERVER_NAME}} - {{DESCRIPTION}}
        """

        import asyncio
        import json
        import sys
        from typing import Any, Dict, List

        from mcp.server import Server
        {{TRANSPORT_IMPORTS}}
        ''')
    header += f"from mcp.types import {', '.join(_PYTHON_TYPES[category])}"

    parts = [
        header,
        "{{SERVER_CODE}}",
        'server = Server("{{SERVER_NAME}}")',
    ]
    slots = _category_slots(category)
    if slots:
        parts.append(slots)
    parts.extend(h.rstrip("\n") for h in handlers)
    if "CUSTOM_CODE" in CATEGORY_VARIABLES[category]:
        parts.append("{{CUSTOM_CODE}}")
    parts.append("{{BOOTSTRAP}}")
    return "\n\n\n".join(parts) + "\n"


def template_bodies() -> dict[tuple[Language, TemplateCategory], str]:
    """Return the entry-file body for every language x category pair."""
    bodies: dict[tuple[Language, TemplateCategory], str] = {}
    for category in TemplateCategory:
        node = _node_body(category)
        bodies[(Language.TYPESCRIPT, category)] = node
        bodies[(Language.JAVASCRIPT, category)] = node
        bodies[(Language.PYTHON, category)] = _python_body(category)
    return bodies
