"""Pydantic v2 models for the MCP Server Builder response parser.

Defines the request describing what to generate and the structured record
recovered from a model response.  JSON produced by the model uses camelCase
keys (``serverCode``, ``installInstructions``...); the models accept those
aliases and expose snake_case attributes.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    StrictStr,
    field_validator,
    model_validator,
)


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Language(str, Enum):
    """Target language of the generated MCP server."""
    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"
    PYTHON = "python"


class Transport(str, Enum):
    """Transport the generated server listens on."""
    STDIO = "stdio"
    SSE = "sse"


# ---------------------------------------------------------------------------
# Generation request
# ---------------------------------------------------------------------------

_PROJECT_NAME_PATTERN = re.compile(r"[a-z0-9-]+")


class GenerationRequest(BaseModel):
    """Everything needed to scaffold one server project."""
    description: str = Field(..., description="What the server should do")
    language: Language = Field(default=Language.TYPESCRIPT, description="Target language")
    transport: Transport = Field(default=Transport.STDIO, description="Server transport")
    output_dir: Path = Field(..., description="Absolute directory the project is written to")
    project_name: str = Field(..., description="Filesystem-safe slug, e.g. 'weather-server'")

    @field_validator("description")
    @classmethod
    def _description_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("description cannot be empty")
        return value.strip()

    @field_validator("output_dir")
    @classmethod
    def _output_dir_absolute(cls, value: Path) -> Path:
        if not value.is_absolute():
            raise ValueError(f"output_dir must be absolute, got {value}")
        return value

    @field_validator("project_name")
    @classmethod
    def _project_name_is_slug(cls, value: str) -> str:
        if not _PROJECT_NAME_PATTERN.fullmatch(value):
            raise ValueError(
                f"project_name must match [a-z0-9-]+ and be non-empty, got {value!r}"
            )
        return value


# ---------------------------------------------------------------------------
# Parsed record
# ---------------------------------------------------------------------------

# Textual fields that can stand in for missing server code.
COMPENSATING_FIELDS: tuple[str, ...] = (
    "manifest",
    "readme",
    "install_instructions",
    "usage_example",
)


class ParsedRecord(BaseModel):
    """Structured fields recovered from a raw model response.

    Immutable once created.  Valid only when ``server_code`` is non-empty or
    at least one of the compensating text fields is populated; an empty
    record means extraction failed, not that the project is empty.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    server_code: StrictStr = Field(
        default="",
        validation_alias=AliasChoices("serverCode", "server_code"),
        serialization_alias="serverCode",
    )
    manifest: Optional[StrictStr] = Field(
        default=None,
        validation_alias=AliasChoices("manifest", "packageJson"),
        description="Free-form manifest text, e.g. a package.json body",
    )
    readme: Optional[StrictStr] = None
    install_instructions: Optional[StrictStr] = Field(
        default=None,
        validation_alias=AliasChoices("installInstructions", "install_instructions"),
        serialization_alias="installInstructions",
    )
    usage_example: Optional[StrictStr] = Field(
        default=None,
        validation_alias=AliasChoices("usageExample", "usage_example"),
        serialization_alias="usageExample",
    )
    dependencies: Optional[dict[StrictStr, StrictStr]] = None
    dev_dependencies: Optional[dict[StrictStr, StrictStr]] = Field(
        default=None,
        validation_alias=AliasChoices("devDependencies", "dev_dependencies"),
        serialization_alias="devDependencies",
    )
    scripts: Optional[dict[StrictStr, StrictStr]] = None
    additional_files: Optional[dict[StrictStr, Any]] = Field(
        default=None,
        validation_alias=AliasChoices("additionalFiles", "additional_files"),
        serialization_alias="additionalFiles",
        description="Relative path -> file content, merged over generated files",
    )
    # Set only by the extraction strategies; a "synthesized" key in model
    # output is an unknown field and ignored.
    _synthesized: frozenset[str] = PrivateAttr(default_factory=frozenset)

    @field_validator("dependencies", "dev_dependencies", mode="before")
    @classmethod
    def _package_list_to_mapping(cls, value: Any) -> Any:
        # The prompt allows a bare list of package names.
        if isinstance(value, list) and all(isinstance(v, str) for v in value):
            return {name: "latest" for name in value}
        return value

    @field_validator("manifest", "readme", "install_instructions", "usage_example", mode="before")
    @classmethod
    def _text_not_null(cls, value: Any) -> Any:
        # Leave the key out to mean absent; null is a wrong type.
        if value is None:
            raise ValueError("must be a string, not null")
        return value

    @model_validator(mode="after")
    def _has_usable_content(self) -> "ParsedRecord":
        if self.server_code.strip():
            return self
        if any(getattr(self, name) and getattr(self, name).strip() for name in COMPENSATING_FIELDS):
            return self
        raise ValueError(
            "record has no server code and no manifest, readme, install instructions or usage example"
        )

    @property
    def synthesized(self) -> frozenset[str]:
        """Fields filled with generic boilerplate instead of recovered content."""
        return self._synthesized

    def with_synthesized(self, fields: frozenset[str]) -> "ParsedRecord":
        """Return a copy of this record marking *fields* as synthesized."""
        record = self.model_copy()
        record._synthesized = frozenset(fields)
        return record

    def is_synthesized(self, field: str) -> bool:
        """Return ``True`` if *field* holds fabricated boilerplate."""
        return field in self.synthesized
