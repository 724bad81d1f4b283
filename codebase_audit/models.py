"""
Data model for codebase_audit.

Records are created once per file per run and never shared between runs.
`to_dict` methods produce the camelCase shapes of the call contract.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from codebase_audit.languages import Language

if TYPE_CHECKING:
    from typing import Any

    from codebase_audit.config import AnalysisConfig


@dataclass(frozen=True)
class CodeBlock:
    """A maximal run of consecutive code lines (1-based, inclusive span)."""

    start_line: int
    end_line: int
    lines: tuple[str, ...]
    hash: str

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def content(self) -> str:
        return "\n".join(self.lines)


@dataclass(frozen=True)
class FileRecord:
    """A file analyzed for duplication."""

    path: Path
    relative_path: str
    language: Language
    size_bytes: int
    lines: int
    content_hash: str
    blocks: tuple[CodeBlock, ...]
    tokens: tuple[str, ...]
    token_set: frozenset[str]

    def summary(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "relativePath": self.relative_path,
            "language": self.language.value,
            "lines": self.lines,
            "sizeBytes": self.size_bytes,
            "contentHash": self.content_hash,
            "blocks": len(self.blocks),
            "tokens": len(self.tokens),
        }


@dataclass(frozen=True)
class FileMetrics:
    """A file analyzed for size, comment density, structure and complexity."""

    path: Path
    relative_path: str
    language: Language
    extension: str
    size_bytes: int
    lines: int
    code_lines: int
    comment_lines: int
    blank_lines: int
    functions: int
    classes: int
    complexity: int
    last_modified: float

    @property
    def size_kb(self) -> float:
        return round(self.size_bytes / 1024, 2)

    def summary(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "relativePath": self.relative_path,
            "language": self.language.value,
            "extension": self.extension,
            "sizeBytes": self.size_bytes,
            "sizeKB": self.size_kb,
            "lines": self.lines,
            "codeLines": self.code_lines,
            "commentLines": self.comment_lines,
            "blankLines": self.blank_lines,
            "functions": self.functions,
            "classes": self.classes,
            "complexity": self.complexity,
            "lastModified": datetime.fromtimestamp(self.last_modified, tz=timezone.utc).isoformat(),
        }


class DuplicateKind(str, Enum):
    EXACT_FILE = "exact-file"
    EXACT_BLOCK = "exact-block"
    SIMILAR_FILE = "similar-file"
    SIMILAR_BLOCK = "similar-block"

    @property
    def is_exact(self) -> bool:
        return self in (DuplicateKind.EXACT_FILE, DuplicateKind.EXACT_BLOCK)

    @property
    def is_block(self) -> bool:
        return self in (DuplicateKind.EXACT_BLOCK, DuplicateKind.SIMILAR_BLOCK)


@dataclass(frozen=True)
class DuplicateMember:
    """One location taking part in a duplicate group."""

    path: str
    lines: int
    language: Language
    start_line: int | None = None
    end_line: int | None = None

    @classmethod
    def for_file(cls, record: FileRecord) -> "DuplicateMember":
        return cls(record.relative_path, record.lines, record.language)

    @classmethod
    def for_block(cls, record: FileRecord, block: CodeBlock) -> "DuplicateMember":
        return cls(record.relative_path, block.line_count, record.language, block.start_line, block.end_line)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"path": self.path}
        if self.start_line is not None:
            data["startLine"] = self.start_line
            data["endLine"] = self.end_line
        data["lines"] = self.lines
        data["language"] = self.language.value
        return data


@dataclass(frozen=True)
class DuplicateGroup:
    """
    Two or more locations with identical or similar content.

    Exact groups carry similarity 1.0 and the shared hash; similar groups
    are always pairs.
    """

    kind: DuplicateKind
    members: tuple[DuplicateMember, ...]
    similarity: float
    duplicate_lines: int
    hash: str | None = None
    content: str | None = None

    def __post_init__(self) -> None:
        if len(self.members) < 2:
            raise ValueError(f"A {self.kind.value} group needs at least 2 members")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.kind.value,
            "similarity": self.similarity,
            "duplicateLines": self.duplicate_lines,
            "members": [member.to_dict() for member in self.members],
        }
        if self.hash is not None:
            data["hash"] = self.hash
        if self.content is not None:
            data["content"] = self.content
        return data


@dataclass
class LanguageStats:
    """Running per-language totals for the metrics report."""

    files: int = 0
    lines: int = 0
    code_lines: int = 0
    comment_lines: int = 0
    blank_lines: int = 0
    size_bytes: int = 0
    functions: int = 0
    classes: int = 0
    average_complexity: float = 0.0

    def add(self, metrics: FileMetrics) -> None:
        """Fold one file into the totals and the running complexity average."""
        self.files += 1
        self.lines += metrics.lines
        self.code_lines += metrics.code_lines
        self.comment_lines += metrics.comment_lines
        self.blank_lines += metrics.blank_lines
        self.size_bytes += metrics.size_bytes
        self.functions += metrics.functions
        self.classes += metrics.classes
        n = self.files
        self.average_complexity = (self.average_complexity * (n - 1) + metrics.complexity) / n

    def to_dict(self) -> dict[str, Any]:
        return {
            "files": self.files,
            "lines": self.lines,
            "codeLines": self.code_lines,
            "commentLines": self.comment_lines,
            "blankLines": self.blank_lines,
            "sizeBytes": self.size_bytes,
            "functions": self.functions,
            "classes": self.classes,
            "averageComplexity": round(self.average_complexity, 2),
        }


@dataclass
class AnalysisSession:
    """
    Intermediate state of a single run.

    Owned by one scanner call and dropped once the report is built, so
    concurrent runs never share state.
    """

    config: AnalysisConfig
    root: Path
    cancel_event: threading.Event = field(default_factory=threading.Event)
    total_files: int = 0
    skipped: list[str] = field(default_factory=list)
    truncated: bool = False
    started_at: float = field(default_factory=time.monotonic)

    @property
    def deadline(self) -> float | None:
        if self.config.timeout is None:
            return None
        return self.started_at + self.config.timeout

    def should_stop(self) -> bool:
        """True once the run was cancelled or its deadline has passed."""
        if self.cancel_event.is_set():
            return True
        deadline = self.deadline
        return deadline is not None and time.monotonic() >= deadline
