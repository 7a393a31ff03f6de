"""Unit tests for Config (mcp_builder.config).

Tests cover:
- Config defaults and validation
- project_name derivation and the server suffix
- make_request (valid and invalid input)
- save/load round trip
- from_env
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from mcp_builder.config import Config
from mcp_builder.errors import RequestValidationFailure
from mcp_builder.parser.models import Language, Transport


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestConfigDefaults:
    @pytest.mark.unit
    def test_default_values(self):
        config = Config()
        assert config.default_language is Language.TYPESCRIPT
        assert config.default_transport is Transport.STDIO
        assert config.output_dir == Path("./output")
        assert config.server_suffix is True
        assert config.min_response_length == 10

    @pytest.mark.unit
    def test_negative_min_length_rejected(self):
        with pytest.raises(ValidationError):
            Config(min_response_length=-1)

    @pytest.mark.unit
    def test_unknown_language_rejected(self):
        with pytest.raises(ValidationError):
            Config(default_language="cobol")


# ---------------------------------------------------------------------------
# Naming and requests
# ---------------------------------------------------------------------------


class TestProjectName:
    @pytest.mark.unit
    def test_explicit_name_slugged_and_suffixed(self):
        assert Config().project_name("ignored", "Weather Tools!") == "weather-tools-server"

    @pytest.mark.unit
    def test_name_derived_from_description(self):
        assert Config().project_name("Fetch GitHub issues") == "fetch-github-issues-server"

    @pytest.mark.unit
    def test_suffix_disabled(self):
        config = Config(server_suffix=False)
        assert config.project_name("d", "Weather Tools") == "weather-tools"

    @pytest.mark.unit
    def test_unusable_name_falls_back_to_description(self):
        assert Config().project_name("Echo", "!!!") == "echo-server"


class TestMakeRequest:
    @pytest.mark.unit
    def test_uses_defaults(self, tmp_path: Path):
        config = Config(output_dir=tmp_path, default_language=Language.PYTHON)
        request = config.make_request("Weather lookups", name="weather")
        assert request.project_name == "weather-server"
        assert request.language is Language.PYTHON
        assert request.transport is Transport.STDIO
        assert request.output_dir == (tmp_path / "weather-server").resolve()
        assert request.output_dir.is_absolute()

    @pytest.mark.unit
    def test_overrides(self, tmp_path: Path):
        request = Config(output_dir=tmp_path).make_request(
            "d", name="x", language=Language.JAVASCRIPT, transport=Transport.SSE
        )
        assert request.language is Language.JAVASCRIPT
        assert request.transport is Transport.SSE

    @pytest.mark.unit
    def test_relative_output_dir_resolved(self):
        request = Config(output_dir=Path("out")).make_request("Echo server")
        assert request.output_dir.is_absolute()
        assert request.output_dir.name == "echo-server"

    @pytest.mark.unit
    def test_blank_description_rejected(self, tmp_path: Path):
        with pytest.raises(RequestValidationFailure):
            Config(output_dir=tmp_path).make_request("   ", name="x")

    @pytest.mark.unit
    def test_no_usable_name_rejected(self, tmp_path: Path):
        with pytest.raises(RequestValidationFailure, match="Invalid generation request"):
            Config(output_dir=tmp_path).make_request("!!!", name="???")


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------


class TestConfigSerialisation:
    @pytest.mark.unit
    def test_save_and_load_roundtrip(self, tmp_path: Path):
        original = Config(
            default_language=Language.PYTHON,
            default_transport=Transport.SSE,
            output_dir=tmp_path / "projects",
            server_suffix=False,
            min_response_length=25,
        )
        path = original.save(tmp_path / "nested" / "config.json")
        assert path.exists()

        loaded = Config.load(path)
        assert loaded == original


class TestConfigFromEnv:
    @pytest.mark.unit
    def test_no_env_gives_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            assert Config.from_env() == Config()

    @pytest.mark.unit
    def test_all_variables(self, tmp_path: Path):
        env = {
            "MCP_BUILDER_DEFAULT_LANGUAGE": "Python",
            "MCP_BUILDER_DEFAULT_TRANSPORT": "SSE",
            "MCP_BUILDER_OUTPUT_DIR": str(tmp_path),
            "MCP_BUILDER_SERVER_SUFFIX": "false",
            "MCP_BUILDER_MIN_RESPONSE_LENGTH": "50",
        }
        with patch.dict(os.environ, env, clear=True):
            config = Config.from_env()
        assert config.default_language is Language.PYTHON
        assert config.default_transport is Transport.SSE
        assert config.output_dir == tmp_path
        assert config.server_suffix is False
        assert config.min_response_length == 50

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["1", "true", "YES", "on"])
    def test_suffix_truthy_values(self, value: str):
        with patch.dict(os.environ, {"MCP_BUILDER_SERVER_SUFFIX": value}, clear=True):
            assert Config.from_env().server_suffix is True

    @pytest.mark.unit
    def test_invalid_length_raises(self):
        with patch.dict(os.environ, {"MCP_BUILDER_MIN_RESPONSE_LENGTH": "abc"}, clear=True):
            with pytest.raises(ValueError):
                Config.from_env()
