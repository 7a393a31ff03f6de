"""Tests for the parser Pydantic models (mcp_builder.parser.models).

Covers:
- GenerationRequest field validation
- ParsedRecord aliases, strict typing and the usable-content rule
- Dependency list normalisation
- Synthesized field tracking
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from mcp_builder.parser.models import (
    GenerationRequest,
    Language,
    ParsedRecord,
    Transport,
)


pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# GenerationRequest
# ---------------------------------------------------------------------------


class TestGenerationRequest:
    def test_defaults(self, tmp_path: Path):
        req = GenerationRequest(
            description="Weather lookups",
            output_dir=tmp_path,
            project_name="weather-server",
        )
        assert req.language == Language.TYPESCRIPT
        assert req.transport == Transport.STDIO

    def test_description_is_stripped(self, tmp_path: Path):
        req = GenerationRequest(
            description="  Weather lookups  ",
            output_dir=tmp_path,
            project_name="weather-server",
        )
        assert req.description == "Weather lookups"

    def test_blank_description_rejected(self, tmp_path: Path):
        with pytest.raises(ValidationError, match="description"):
            GenerationRequest(description="   ", output_dir=tmp_path, project_name="x")

    def test_relative_output_dir_rejected(self):
        with pytest.raises(ValidationError, match="absolute"):
            GenerationRequest(
                description="d", output_dir=Path("relative/dir"), project_name="x"
            )

    @pytest.mark.parametrize(
        "name", ["", "Weather", "weather_server", "weather server", "a/b", "weather\n", "\nweather"]
    )
    def test_invalid_project_names(self, tmp_path: Path, name: str):
        with pytest.raises(ValidationError):
            GenerationRequest(description="d", output_dir=tmp_path, project_name=name)

    def test_language_from_string(self, tmp_path: Path):
        req = GenerationRequest(
            description="d",
            language="python",
            transport="sse",
            output_dir=tmp_path,
            project_name="py-server",
        )
        assert req.language is Language.PYTHON
        assert req.transport is Transport.SSE

    def test_unknown_language_rejected(self, tmp_path: Path):
        with pytest.raises(ValidationError):
            GenerationRequest(
                description="d", language="rust", output_dir=tmp_path, project_name="x"
            )


# ---------------------------------------------------------------------------
# ParsedRecord
# ---------------------------------------------------------------------------


class TestParsedRecord:
    def test_camel_case_aliases(self):
        record = ParsedRecord.model_validate(
            {
                "serverCode": "x",
                "installInstructions": "i",
                "usageExample": "u",
                "devDependencies": {"typescript": "^5.0.0"},
                "additionalFiles": {"a.txt": "A"},
                "packageJson": "{}",
            }
        )
        assert record.server_code == "x"
        assert record.install_instructions == "i"
        assert record.usage_example == "u"
        assert record.dev_dependencies == {"typescript": "^5.0.0"}
        assert record.additional_files == {"a.txt": "A"}
        assert record.manifest == "{}"

    def test_snake_case_names_accepted(self):
        record = ParsedRecord(server_code="x", install_instructions="i")
        assert record.install_instructions == "i"

    def test_only_server_code_is_valid(self):
        record = ParsedRecord(server_code="print('hi')")
        assert record.readme is None
        assert record.synthesized == frozenset()

    def test_compensating_field_without_code_is_valid(self):
        record = ParsedRecord(readme="# Title")
        assert record.server_code == ""

    def test_empty_record_rejected(self):
        with pytest.raises(ValidationError, match="no server code"):
            ParsedRecord()

    def test_whitespace_only_fields_rejected(self):
        with pytest.raises(ValidationError):
            ParsedRecord(server_code="   ", readme="\n\t")

    def test_numeric_server_code_not_coerced(self):
        with pytest.raises(ValidationError):
            ParsedRecord.model_validate({"serverCode": 42})

    def test_dependencies_must_be_string_mapping(self):
        with pytest.raises(ValidationError):
            ParsedRecord.model_validate({"serverCode": "x", "dependencies": {"a": 1}})

    def test_scripts_must_be_mapping(self):
        with pytest.raises(ValidationError):
            ParsedRecord.model_validate({"serverCode": "x", "scripts": "npm start"})

    def test_dependency_list_normalised(self):
        record = ParsedRecord.model_validate(
            {"serverCode": "x", "dependencies": ["zod", "axios"]}
        )
        assert record.dependencies == {"zod": "latest", "axios": "latest"}

    def test_record_is_frozen(self):
        record = ParsedRecord(server_code="x")
        with pytest.raises(ValidationError):
            record.server_code = "y"

    def test_is_synthesized(self):
        record = ParsedRecord(server_code="x", readme="r").with_synthesized(frozenset({"readme"}))
        assert record.is_synthesized("readme")
        assert not record.is_synthesized("usage_example")

    def test_with_synthesized_leaves_original_untouched(self):
        record = ParsedRecord(server_code="x", usage_example="u")
        marked = record.with_synthesized(frozenset({"usage_example"}))
        assert marked.usage_example == "u"
        assert marked.is_synthesized("usage_example")
        assert record.synthesized == frozenset()

    def test_synthesized_key_in_input_ignored(self):
        record = ParsedRecord.model_validate(
            {"serverCode": "x", "usageExample": "u", "synthesized": ["usage_example"]}
        )
        assert record.synthesized == frozenset()
        assert not record.is_synthesized("usage_example")

    @pytest.mark.parametrize("key", ["readme", "installInstructions", "usageExample", "packageJson"])
    def test_null_text_field_rejected(self, key: str):
        with pytest.raises(ValidationError, match="not null"):
            ParsedRecord.model_validate({"serverCode": "x", key: None})

    def test_null_dependencies_treated_as_absent(self):
        record = ParsedRecord.model_validate({"serverCode": "x", "dependencies": None})
        assert record.dependencies is None
