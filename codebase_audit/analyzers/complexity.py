"""
Complexity analyzer for codebase_audit.

Measures each file: line types, function/class declarations and an
approximate cyclomatic complexity from branch keywords.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from codebase_audit.languages import METRICS_LANGUAGES
from codebase_audit.models import FileMetrics
from codebase_audit.utils import read_source, relative_path, split_lines, stat_file

if TYPE_CHECKING:
    from typing import Sequence

    from codebase_audit.languages import LanguageProfile, LanguageTable

logger = logging.getLogger(__name__)


def classify_lines(lines: Sequence[str], profile: LanguageProfile) -> tuple[int, int, int]:
    """
    Count code, comment and blank lines.

    Args:
        lines: File lines.
        profile: Profile supplying the comment prefixes.

    Returns:
        Tuple of (code lines, comment lines, blank lines).
    """
    code = comment = blank = 0
    for line in lines:
        trimmed = line.strip()
        if not trimmed:
            blank += 1
        elif profile.is_comment(trimmed):
            comment += 1
        else:
            code += 1
    return code, comment, blank


class ComplexityAnalyzer:
    """Build per-file metrics using a language table."""

    def __init__(self, table: LanguageTable = METRICS_LANGUAGES):
        """
        Initialize the complexity analyzer.

        Args:
            table: Table used to classify files and look up profiles.
        """
        self.table = table

    def analyze_file(self, filepath: Path, root: Path) -> FileMetrics:
        """
        Measure one file.

        Args:
            filepath: Absolute path to the file.
            root: Workspace root, for the relative path.

        Returns:
            The file's metrics.

        Raises:
            FileStatError: If the file can't be stat'ed.
            FileReadError: If the file can't be read as UTF-8.
        """
        stat = stat_file(filepath)
        content = read_source(filepath)
        language = self.table.classify(filepath)
        profile = self.table.profile(language)

        lines = split_lines(content)
        code, comment, blank = classify_lines(lines, profile)

        return FileMetrics(
            path=filepath,
            relative_path=relative_path(filepath, root),
            language=language,
            extension=filepath.suffix,
            size_bytes=stat.st_size,
            lines=len(lines),
            code_lines=code,
            comment_lines=comment,
            blank_lines=blank,
            functions=profile.count_functions(content),
            classes=profile.count_classes(content),
            complexity=profile.complexity(content),
            last_modified=stat.st_mtime,
        )
