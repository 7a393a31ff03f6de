"""Typed errors raised by the MCP Server Builder core.

Every failure the core surfaces derives from :class:`BuilderError`, so callers
(the CLI, an editor extension) can catch one type and render a single
actionable message per failed generation attempt.
"""

from __future__ import annotations

from dataclasses import dataclass


class BuilderError(Exception):
    """Base class for every error raised by the builder core."""


class RequestValidationFailure(BuilderError):
    """Raised when a generation request or raw response is rejected up front."""


class ParseFailure(BuilderError):
    """Raised when no schema-valid record can be recovered from a response."""

    def __init__(self, strategy: str, message: str) -> None:
        self.strategy = strategy
        super().__init__(f"[{strategy}] {message}")


class SchemaValidationFailure(ParseFailure):
    """Raised when JSON candidates were found but none matched the schema.

    Individual rejections are not fatal; this is only raised once every
    candidate has been tried.  ``reasons`` holds one entry per rejection.
    """

    def __init__(self, strategy: str, reasons: list[str]) -> None:
        self.reasons = list(reasons)
        detail = "; ".join(self.reasons) if self.reasons else "no candidates"
        super().__init__(
            strategy,
            f"{len(self.reasons)} JSON candidate(s) rejected by schema validation: {detail}",
        )


class TemplateNotFound(BuilderError, KeyError):
    """Raised when a template name is not registered.

    Indicates a mismatch between a builder and the registry, i.e. a
    programming error rather than bad input.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Template not found: {name}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message.
        return str(self.args[0])


class StructureValidationFailure(BuilderError):
    """Raised when an assembled project structure lacks required files."""


@dataclass(frozen=True)
class FileFailure:
    """One path that could not be created during materialization."""

    path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


class MaterializationFailure(BuilderError):
    """Raised after materialization when one or more paths failed.

    Paths that were written successfully stay on disk; there is no rollback.
    """

    def __init__(self, failures: list[FileFailure]) -> None:
        self.failures = list(failures)
        details = "\n".join(str(f) for f in self.failures)
        super().__init__(f"Failed to create {len(self.failures)} path(s):\n{details}")

    @property
    def paths(self) -> list[str]:
        """Relative paths of every failed entry, in the order attempted."""
        return [f.path for f in self.failures]
