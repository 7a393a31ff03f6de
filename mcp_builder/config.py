"""MCP Server Builder configuration.

Typed defaults for the CLI and for callers embedding the builder.  Settings
use a Pydantic v2 model so they are validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from mcp_builder.errors import RequestValidationFailure
from mcp_builder.parser.models import GenerationRequest, Language, Transport
from mcp_builder.utils import ensure_server_suffix, sanitize_name

_TRUE_VALUES = {"1", "true", "yes", "on"}


class Config(BaseModel):
    """Global MCP Server Builder configuration.

    Instances are typically created once by the CLI entry point (usually via
    :meth:`from_env`) and then used to build every ``GenerationRequest``.
    """

    default_language: Language = Field(default=Language.TYPESCRIPT)
    default_transport: Transport = Field(default=Transport.STDIO)
    output_dir: Path = Field(
        default=Path("./output"),
        description="Parent directory; each project gets a subdirectory named after it",
    )
    server_suffix: bool = Field(
        default=True, description="Append '-server' to project names that lack it"
    )
    min_response_length: int = Field(
        default=10, ge=0, description="Shorter responses are rejected before parsing"
    )

    # ------------------------------------------------------------------
    # Request construction
    # ------------------------------------------------------------------

    def project_name(self, description: str, name: Optional[str] = None) -> str:
        """Return the project slug for *name*, or one derived from *description*."""
        slug = sanitize_name(name or "") or sanitize_name(description)
        if slug and self.server_suffix:
            slug = ensure_server_suffix(slug)
        return slug

    def make_request(
        self,
        description: str,
        name: Optional[str] = None,
        language: Optional[Language] = None,
        transport: Optional[Transport] = None,
    ) -> GenerationRequest:
        """Build a validated ``GenerationRequest`` from user input.

        Raises:
            RequestValidationFailure: If the resulting request is invalid,
                e.g. an empty description or a name with no usable characters.
        """
        project_name = self.project_name(description, name)
        try:
            return GenerationRequest(
                description=description,
                language=language or self.default_language,
                transport=transport or self.default_transport,
                output_dir=(self.output_dir / project_name).resolve(),
                project_name=project_name,
            )
        except ValidationError as exc:
            raise RequestValidationFailure(f"Invalid generation request: {exc}") from exc

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            MCP_BUILDER_DEFAULT_LANGUAGE, MCP_BUILDER_DEFAULT_TRANSPORT,
            MCP_BUILDER_OUTPUT_DIR, MCP_BUILDER_SERVER_SUFFIX,
            MCP_BUILDER_MIN_RESPONSE_LENGTH.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("MCP_BUILDER_DEFAULT_LANGUAGE"):
            kwargs["default_language"] = os.environ["MCP_BUILDER_DEFAULT_LANGUAGE"].lower()
        if os.environ.get("MCP_BUILDER_DEFAULT_TRANSPORT"):
            kwargs["default_transport"] = os.environ["MCP_BUILDER_DEFAULT_TRANSPORT"].lower()
        if os.environ.get("MCP_BUILDER_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["MCP_BUILDER_OUTPUT_DIR"])
        if os.environ.get("MCP_BUILDER_SERVER_SUFFIX"):
            kwargs["server_suffix"] = (
                os.environ["MCP_BUILDER_SERVER_SUFFIX"].strip().lower() in _TRUE_VALUES
            )
        if os.environ.get("MCP_BUILDER_MIN_RESPONSE_LENGTH"):
            kwargs["min_response_length"] = int(os.environ["MCP_BUILDER_MIN_RESPONSE_LENGTH"])
        return cls(**kwargs)
