"""End-to-end generation across every language and transport.

Each combination runs a real response through ``ServerGenerator`` and checks
the project that lands on disk.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from mcp_builder.parser.fallback import build_fallback_response
from mcp_builder.parser.models import Language, Transport
from mcp_builder.pipeline import ServerGenerator


ENTRY_FILES = {
    Language.TYPESCRIPT: "server.ts",
    Language.JAVASCRIPT: "server.js",
    Language.PYTHON: "server.py",
}

MANIFESTS = {
    Language.TYPESCRIPT: "package.json",
    Language.JAVASCRIPT: "package.json",
    Language.PYTHON: "requirements.txt",
}

COMBINATIONS = [(language, transport) for language in Language for transport in Transport]


def _ids(combo) -> str:
    language, transport = combo
    return f"{language.value}-{transport.value}"


def _check_project(root: Path, language: Language, transport: Transport) -> str:
    entry = (root / ENTRY_FILES[language]).read_text(encoding="utf-8")
    assert "{{" not in entry
    assert (root / "README.md").is_file()
    assert (root / ".gitignore").is_file()

    manifest = (root / MANIFESTS[language]).read_text(encoding="utf-8")
    if language is Language.PYTHON:
        assert "mcp>=1.0.0" in manifest
    else:
        package = json.loads(manifest)
        assert package["dependencies"]["@modelcontextprotocol/sdk"] == "^0.5.0"

    if transport is Transport.SSE:
        assert "sse" in entry.lower()
    return entry


@pytest.mark.integration
@pytest.mark.parametrize("combo", COMBINATIONS, ids=_ids)
def test_fallback_response(make_request, combo):
    language, transport = combo
    request = make_request(language=language, transport=transport)

    result = ServerGenerator().generate_project(request, build_fallback_response(request))

    assert result.strategy == "json"
    assert result.report.ok
    entry = _check_project(request.output_dir, language, transport)
    assert "echo" in entry
    if language is Language.PYTHON:
        compile(entry, "server.py", "exec")


@pytest.mark.integration
@pytest.mark.parametrize("combo", COMBINATIONS, ids=_ids)
def test_json_response(make_request, json_response, combo):
    language, transport = combo
    request = make_request(language=language, transport=transport)

    result = ServerGenerator().generate_project(request, json_response)

    assert result.strategy == "json"
    _check_project(request.output_dir, language, transport)
    assert (request.output_dir / "src" / "weather.ts").is_file()


@pytest.mark.integration
@pytest.mark.parametrize("language", [Language.TYPESCRIPT, Language.JAVASCRIPT], ids=lambda l: l.value)
def test_markdown_response(make_request, markdown_response, language):
    request = make_request(language=language)

    result = ServerGenerator().generate_project(request, markdown_response)

    assert result.strategy == "markdown"
    entry = _check_project(request.output_dir, language, Transport.STDIO)
    assert "const tools = [];" in entry


@pytest.mark.integration
def test_plain_response(make_request, plain_response):
    request = make_request(language=Language.JAVASCRIPT, transport=Transport.SSE)

    result = ServerGenerator().generate_project(request, plain_response)

    assert result.strategy == "text"
    entry = _check_project(request.output_dir, Language.JAVASCRIPT, Transport.SSE)
    assert "const x = 1;" in entry
    assert "let transport;" in entry


@pytest.mark.integration
def test_regenerating_into_same_directory(make_request, json_response):
    request = make_request()
    generator = ServerGenerator()

    generator.generate_project(request, json_response)
    result = generator.generate_project(request, json_response)

    assert result.report.ok
    assert (request.output_dir / "server.ts").is_file()
