"""Prompt text that asks a model for a response the parser understands.

The system prompt pins the JSON schema recovered by the extraction
strategies; the user prompt adds language and transport guidance for one
generation request.  Sending the prompt is left to the caller.
"""

import textwrap

from .models import GenerationRequest, Language, Transport

_SYSTEM_PROMPT = textwrap.dedent("""\
    You are an expert assistant that generates Model Context Protocol (MCP) servers.
    Always reply with a single JSON document wrapped in a ```json code block.
    The JSON must match the following structure:
    {
      "serverCode": string,
      "packageJson"?: string,
      "readme"?: string,
      "installInstructions"?: string,
      "usageExample"?: string,
      "dependencies"?: Record<string,string> | string[],
      "devDependencies"?: Record<string,string> | string[],
      "scripts"?: Record<string,string>,
      "additionalFiles"?: Record<string,string>
    }
    When providing dependencies prefer Record<string,string> with semantic version ranges.
    Do not include any explanations outside the JSON code block.""")

_LANGUAGE_GUIDANCE = {
    Language.TYPESCRIPT: (
        "Use TypeScript targeting Node.js 18+. Provide typesafe tool handlers "
        "and include a package.json."
    ),
    Language.JAVASCRIPT: (
        "Use modern JavaScript (ES2020) with ECMAScript modules. Provide a "
        "package.json with runnable scripts."
    ),
    Language.PYTHON: (
        "Use Python 3.10+ syntax. Include dependencies in a requirements.txt "
        "via additionalFiles when needed."
    ),
}

_TRANSPORT_GUIDANCE = {
    Transport.STDIO: "Configure the server for stdio transport.",
    Transport.SSE: (
        "Configure the server for Server-Sent Events transport. Include any "
        "setup needed for SSE in the README."
    ),
}


def build_system_prompt() -> str:
    """Return the system prompt describing the expected response schema."""
    return _SYSTEM_PROMPT


def build_user_prompt(request: GenerationRequest) -> str:
    """Return the user prompt for *request*."""
    lines = [
        f"Goal: Create an MCP server for the following requirement: {request.description.rstrip('.')}.",
        f"Preferred language: {request.language.value}.",
        f"Transport: {request.transport.value}.",
        _LANGUAGE_GUIDANCE[request.language],
        _TRANSPORT_GUIDANCE[request.transport],
        "Ensure the generated server exposes at least one meaningful tool with validation.",
        "Populate README, install instructions, and usage examples so a developer can "
        "quickly run the server.",
        "If additional helper files are needed (e.g., utilities, prompts, schemas), "
        "include them via the additionalFiles property.",
    ]
    return "\n".join(lines)
