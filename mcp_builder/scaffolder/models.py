"""Pydantic models shared by the template registry and project builders."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from mcp_builder.parser.models import Language


class TemplateCategory(str, Enum):
    """Which MCP capabilities an entry-file template wires up."""
    BASIC = "basic"
    TOOLS = "tools"
    RESOURCES = "resources"
    PROMPTS = "prompts"
    ADVANCED = "advanced"


class Template(BaseModel):
    """A named entry-file body with ``{{ NAME }}`` placeholders."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Registry key, e.g. 'typescript-basic'")
    description: str = ""
    language: Language
    category: TemplateCategory
    body: str
    variables: tuple[str, ...] = Field(
        default_factory=tuple,
        description="Placeholder names the body declares",
    )


class RenderResult(BaseModel):
    """Rendered text plus the placeholder names no value was supplied for."""
    content: str
    missing: list[str] = Field(default_factory=list)


class ProjectStructure(BaseModel):
    """Directories and files of a generated project, relative to its root.

    ``files`` keeps insertion order, which is the order files are written.
    Values are normally strings; anything else is reported as a failure when
    the structure is materialized.
    """
    directories: list[str] = Field(default_factory=list)
    files: dict[str, Any] = Field(default_factory=dict)

    def add_directory(self, path: str) -> None:
        """Record *path* once; repeated additions are ignored."""
        if path not in self.directories:
            self.directories.append(path)
