"""Tests for the canned fallback response (mcp_builder.parser.fallback)."""

from __future__ import annotations

import json

import pytest

from mcp_builder.parser.fallback import build_fallback_response
from mcp_builder.parser.models import Language
from mcp_builder.parser.selector import select_strategy
from mcp_builder.parser.strategies import JsonStrategy


pytestmark = pytest.mark.unit


class TestBuildFallbackResponse:
    @pytest.mark.parametrize("language", list(Language))
    def test_parses_with_json_strategy(self, make_request, language: Language):
        request = make_request(language=language, project_name="test-server")
        raw = build_fallback_response(request)

        strategy = select_strategy(raw, language=language)
        assert isinstance(strategy, JsonStrategy)
        record = strategy.parse(raw)
        assert "echo" in record.server_code
        assert record.synthesized == frozenset()

    def test_usage_example_quotes_server_name(self, make_request):
        request = make_request(project_name="test-server")
        payload = json.loads(build_fallback_response(request))
        assert '"test-server"' in payload["usageExample"]

    def test_readme_contains_description(self, make_request):
        request = make_request(description="Echo messages back")
        payload = json.loads(build_fallback_response(request))
        assert "Echo messages back" in payload["readme"]

    def test_python_install_uses_venv(self, make_request):
        request = make_request(language=Language.PYTHON)
        payload = json.loads(build_fallback_response(request))
        assert "python -m venv" in payload["installInstructions"]
        assert "async def _echo" in payload["serverCode"]

    def test_typescript_code_is_typed(self, make_request):
        payload = json.loads(build_fallback_response(make_request()))
        assert "(args: any)" in payload["serverCode"]
