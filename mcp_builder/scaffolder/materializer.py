"""Write a ``ProjectStructure`` to disk.

The structure is validated before any filesystem change.  After that every
directory and every file is attempted in declaration order; failures are
collected and raised together once all writes have been tried.  Files that
were written stay on disk.
"""

from __future__ import annotations

import re
from pathlib import Path, PurePosixPath
from typing import Union

from pydantic import BaseModel, Field

from mcp_builder.errors import FileFailure, MaterializationFailure, StructureValidationFailure
from mcp_builder.utils import print_error, print_success

from .models import ProjectStructure

ENTRY_FILE_PATTERN = re.compile(r"^(server|index)\.[A-Za-z0-9]+$")


def is_entry_file(path: str) -> bool:
    """Return ``True`` if the basename of *path* is ``server.*`` or ``index.*``."""
    return bool(ENTRY_FILE_PATTERN.match(PurePosixPath(path.replace("\\", "/")).name))


def validate_structure(structure: ProjectStructure) -> None:
    """Check *structure* can produce a runnable project.

    Raises:
        StructureValidationFailure: If there are no files or no entry file.
    """
    if not structure.files:
        raise StructureValidationFailure("Project structure contains no files")
    if not any(is_entry_file(path) for path in structure.files):
        listed = ", ".join(sorted(structure.files))
        raise StructureValidationFailure(
            f"Project structure has no entry file (server.* or index.*); files: {listed}"
        )


class MaterializationReport(BaseModel):
    """What :func:`materialize` created under ``root``."""

    root: Path
    directories: list[str] = Field(default_factory=list)
    files: list[str] = Field(default_factory=list)
    failures: list[FileFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _safe_target(root: Path, relative: str) -> Path:
    """Resolve *relative* under *root*; reject paths that leave it."""
    posix = PurePosixPath(relative.replace("\\", "/"))
    if not relative.strip() or posix.is_absolute() or Path(relative).is_absolute():
        raise ValueError("path must be relative to the project root")
    if ".." in posix.parts:
        raise ValueError("path must not contain '..'")
    return root.joinpath(*posix.parts)


def _make_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def _write_file(path: Path, content: str) -> None:
    """Create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def materialize(output_path: Union[str, Path], structure: ProjectStructure) -> MaterializationReport:
    """Create every directory and file of *structure* under *output_path*.

    Returns:
        A report listing the directories and files that were created.

    Raises:
        StructureValidationFailure: Before any I/O, if the structure is unusable.
        MaterializationFailure: After all attempts, naming every path that
            failed.  Successful writes are kept.
    """
    validate_structure(structure)

    root = Path(output_path)
    report = MaterializationReport(root=root)

    try:
        _make_dir(root)
    except OSError as exc:
        report.failures.append(FileFailure(path=".", reason=str(exc)))

    for directory in structure.directories:
        try:
            _make_dir(_safe_target(root, directory))
        except (OSError, ValueError) as exc:
            report.failures.append(FileFailure(path=directory, reason=str(exc)))
        else:
            report.directories.append(directory)

    for path, content in structure.files.items():
        if not isinstance(content, str):
            report.failures.append(
                FileFailure(path=path, reason=f"content must be a string, got {type(content).__name__}")
            )
            continue
        try:
            _write_file(_safe_target(root, path), content)
        except (OSError, ValueError) as exc:
            report.failures.append(FileFailure(path=path, reason=str(exc)))
        else:
            report.files.append(path)

    if report.failures:
        print_error(f"{len(report.failures)} path(s) could not be created under {root}")
        raise MaterializationFailure(report.failures)

    print_success(f"Wrote {len(report.files)} file(s) to {root}")
    return report
