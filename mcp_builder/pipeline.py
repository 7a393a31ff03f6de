"""MCP Server Builder orchestrator.

Turns one saved model response into a server project on disk:

1. VALIDATE  -- Reject an invalid request or a response too short to hold code.
2. PARSE     -- Pick one extraction strategy and recover a ``ParsedRecord``.
3. ASSEMBLE  -- Render the entry file and build the per-language file set.
4. WRITE     -- Materialize the structure under the request's output directory.

Usage::

    python -m mcp_builder.pipeline response.md --description "Weather lookups"
    python -m mcp_builder.pipeline - --description "Weather lookups" -l python < response.txt
    python -m mcp_builder.pipeline --fallback --description "Echo server" --name echo
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError

from mcp_builder.config import Config
from mcp_builder.errors import BuilderError, RequestValidationFailure
from mcp_builder.parser.fallback import build_fallback_response
from mcp_builder.parser.models import GenerationRequest, Language, ParsedRecord, Transport
from mcp_builder.parser.prompts import build_system_prompt, build_user_prompt
from mcp_builder.parser.selector import select_strategy
from mcp_builder.scaffolder.generator import build_structure, select_category
from mcp_builder.scaffolder.materializer import MaterializationReport, materialize
from mcp_builder.scaffolder.models import ProjectStructure
from mcp_builder.scaffolder.templates import TemplateRegistry, default_registry
from mcp_builder.utils import (
    console,
    print_error,
    print_info,
    print_success,
    print_summary_table,
)


class GenerationResult(BaseModel):
    """Everything produced by one successful :meth:`ServerGenerator.generate_project`."""
    request: GenerationRequest
    strategy: str
    record: ParsedRecord
    structure: ProjectStructure
    report: MaterializationReport


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class ServerGenerator:
    """Runs validate -> parse -> assemble -> write for one request at a time.

    Attributes:
        config: Builder configuration (response length threshold, defaults).
        registry: Shared, read-only template registry.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        registry: Optional[TemplateRegistry] = None,
    ) -> None:
        self.config = config or Config()
        self.registry = registry or default_registry()

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_request(
        self, request: Union[GenerationRequest, Mapping[str, Any]]
    ) -> GenerationRequest:
        """Return *request* as a validated ``GenerationRequest``.

        Raises:
            RequestValidationFailure: If a field is invalid or the output
                location cannot be written.
        """
        if not isinstance(request, GenerationRequest):
            try:
                request = GenerationRequest.model_validate(request)
            except ValidationError as exc:
                raise RequestValidationFailure(f"Invalid generation request: {exc}") from exc

        anchor = _nearest_existing(request.output_dir)
        if not os.access(anchor, os.W_OK):
            raise RequestValidationFailure(f"Output directory is not writable: {anchor}")
        return request

    def validate_response(self, raw_response: Any) -> str:
        """Reject responses that cannot possibly hold server code.

        Raises:
            RequestValidationFailure: If the response is not text, is blank,
                or is shorter than ``config.min_response_length``.
        """
        if not isinstance(raw_response, str) or not raw_response.strip():
            raise RequestValidationFailure("Model response is empty.")
        if len(raw_response) < self.config.min_response_length:
            raise RequestValidationFailure(
                f"Model response is too short to contain valid code "
                f"({len(raw_response)} < {self.config.min_response_length} characters)."
            )
        return raw_response

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def parse(self, request: GenerationRequest, raw_response: str) -> tuple[str, ParsedRecord]:
        """Select one strategy for *raw_response* and parse it."""
        strategy = select_strategy(
            raw_response,
            language=request.language,
            server_name=request.project_name,
            description=request.description,
        )
        print_info(f"Parsing response with the {strategy.name} strategy")
        return strategy.name, strategy.parse(raw_response)

    def generate_project(
        self,
        request: Union[GenerationRequest, Mapping[str, Any]],
        raw_response: str,
    ) -> GenerationResult:
        """Generate a complete project from *raw_response*.

        Raises:
            RequestValidationFailure: Bad request or unusable response.
            ParseFailure: No usable record could be recovered.
            StructureValidationFailure: The assembled project has no entry file.
            MaterializationFailure: One or more paths could not be written.
        """
        request = self.validate_request(request)
        raw_response = self.validate_response(raw_response)

        strategy, record = self.parse(request, raw_response)
        structure = build_structure(request, record, self.registry)
        report = materialize(request.output_dir, structure)

        return GenerationResult(
            request=request,
            strategy=strategy,
            record=record,
            structure=structure,
            report=report,
        )


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def _nearest_existing(path: Path) -> Path:
    """Return *path* or the closest ancestor of it that exists."""
    for candidate in (path, *path.parents):
        if candidate.exists():
            return candidate
    return Path(path.anchor or ".")


def _read_response(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.is_file():
        raise RequestValidationFailure(f"Response file not found: {path}")
    return path.read_text(encoding="utf-8")


def _print_result(result: GenerationResult) -> None:
    record = result.record
    print_summary_table(
        {
            "Project": result.request.project_name,
            "Language": result.request.language.value,
            "Transport": result.request.transport.value,
            "Strategy": result.strategy,
            "Template category": select_category(record).value,
            "Files written": str(len(result.report.files)),
            "Synthesized": ", ".join(sorted(record.synthesized)) or "none",
            "Output": str(result.report.root),
        },
        title="Generated MCP Server",
    )


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point for ``python -m mcp_builder.pipeline``."""
    import argparse

    parser = argparse.ArgumentParser(
        description="MCP Server Builder -- turn a model response into a server project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python -m mcp_builder.pipeline response.md -d 'Weather lookups'\n"
            "  python -m mcp_builder.pipeline - -d 'Weather lookups' -l python < response.txt\n"
            "  python -m mcp_builder.pipeline --fallback -d 'Echo server' --name echo\n"
            "  python -m mcp_builder.pipeline --show-prompt -d 'Weather lookups'\n"
        ),
    )

    parser.add_argument(
        "response",
        nargs="?",
        help="Path to a saved model response, or '-' to read stdin",
    )
    parser.add_argument(
        "--description", "-d",
        required=True,
        help="What the generated server should do",
    )
    parser.add_argument(
        "--name", "-n",
        default=None,
        help="Project name (derived from the description if omitted)",
    )
    parser.add_argument(
        "--language", "-l",
        choices=[lang.value for lang in Language],
        default=None,
        help="Target language (default: typescript or MCP_BUILDER_DEFAULT_LANGUAGE)",
    )
    parser.add_argument(
        "--transport", "-t",
        choices=[t.value for t in Transport],
        default=None,
        help="Server transport (default: stdio or MCP_BUILDER_DEFAULT_TRANSPORT)",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Parent output directory (default: ./output or MCP_BUILDER_OUTPUT_DIR)",
    )
    parser.add_argument(
        "--fallback",
        action="store_true",
        help="Ignore RESPONSE and generate the built-in echo-tool server",
    )
    parser.add_argument(
        "--show-prompt",
        action="store_true",
        help="Print the prompts to send to a model and exit",
    )

    args = parser.parse_args(argv)

    config = Config.from_env()
    if args.output:
        config.output_dir = Path(args.output)

    try:
        request = config.make_request(
            args.description,
            name=args.name,
            language=Language(args.language) if args.language else None,
            transport=Transport(args.transport) if args.transport else None,
        )

        if args.show_prompt:
            console.print(build_system_prompt(), markup=False)
            console.print()
            console.print(build_user_prompt(request), markup=False)
            return

        if args.fallback:
            raw_response = build_fallback_response(request)
        elif args.response:
            raw_response = _read_response(args.response)
        else:
            parser.error("RESPONSE is required unless --fallback or --show-prompt is given")

        result = ServerGenerator(config).generate_project(request, raw_response)
    except BuilderError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)

    _print_result(result)
    print_success(f"MCP server project created at {result.report.root}")


if __name__ == "__main__":
    main()
