"""MCP Server Builder scaffolder -- turns a parsed record into a project.

Renders the entry file from the template registry, assembles the manifest,
README and config files for the target language, and writes the result to
disk.

Quick usage::

    from mcp_builder.scaffolder import build_structure, materialize

    structure = build_structure(request, record)
    report = materialize(request.output_dir, structure)
"""

from mcp_builder.scaffolder.generator import (
    JavaScriptBuilder,
    LanguageBuilder,
    PythonBuilder,
    TypeScriptBuilder,
    build_structure,
    select_category,
)
from mcp_builder.scaffolder.materializer import (
    MaterializationReport,
    materialize,
    validate_structure,
)
from mcp_builder.scaffolder.models import ProjectStructure, Template, TemplateCategory
from mcp_builder.scaffolder.templates import TemplateRegistry, default_registry

__all__ = [
    "build_structure",
    "select_category",
    "LanguageBuilder",
    "TypeScriptBuilder",
    "JavaScriptBuilder",
    "PythonBuilder",
    "materialize",
    "validate_structure",
    "MaterializationReport",
    "ProjectStructure",
    "Template",
    "TemplateCategory",
    "TemplateRegistry",
    "default_registry",
]
