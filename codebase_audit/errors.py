"""
Exceptions raised by the codebase_audit engine.

Only `WorkspaceNotFound` and `InvalidThresholds` abort a run. File-level
errors are caught by the scanners, logged, and the file is skipped.
"""

from __future__ import annotations

from pathlib import Path


class AuditError(Exception):
    """Base class for all codebase_audit errors."""


class WorkspaceNotFound(AuditError):
    """The workspace root is missing or is not a directory."""

    def __init__(self, workspace: Path | str) -> None:
        self.workspace = str(workspace)
        super().__init__(f"Workspace directory does not exist: {self.workspace}")


class InvalidThresholds(AuditError):
    """A threshold override has the wrong type or is out of range."""


class FileStatError(AuditError):
    """A file could not be stat'ed while walking the tree."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot stat {path}: {reason}")


class FileReadError(AuditError):
    """A file could not be read or decoded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot read {path}: {reason}")
