"""
Utility functions for codebase_audit.
"""

from __future__ import annotations

import hashlib
import logging
import os
import stat
from pathlib import Path
from typing import TYPE_CHECKING

from codebase_audit.config import DEFAULT_SKIP_DIRS
from codebase_audit.errors import FileReadError, FileStatError, WorkspaceNotFound

if TYPE_CHECKING:
    from typing import Callable, Collection, Iterator

logger = logging.getLogger(__name__)


def hash_text(text: str) -> str:
    """
    Generate a SHA-256 hex digest of text.

    Args:
        text: Text to hash (encoded as UTF-8).

    Returns:
        64-character hex digest.
    """
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def split_lines(content: str) -> list[str]:
    """
    Split file content into lines.

    A trailing newline does not start an extra empty line, so the result
    length matches what a line-by-line reader counts.

    Args:
        content: File content.

    Returns:
        List of lines without their newline characters.
    """
    lines = content.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def should_skip_dir(name: str, skip_dirs: Collection[str] = DEFAULT_SKIP_DIRS) -> bool:
    """
    Check if a directory should be pruned from the walk.

    Args:
        name: Directory basename.
        skip_dirs: Names that are always skipped.

    Returns:
        True for skip-listed names and any dot-directory.
    """
    return name in skip_dirs or name.startswith(".")


def resolve_workspace(workspace: Path | str) -> Path:
    """
    Resolve and validate the workspace root.

    Raises:
        WorkspaceNotFound: If the path is missing or not a directory.
    """
    root = Path(workspace).expanduser()
    if not root.is_dir():
        raise WorkspaceNotFound(workspace)
    return root.resolve()


def walk_files(
    root: Path,
    accept: Callable[[Path], bool] | None = None,
    skip_dirs: Collection[str] = DEFAULT_SKIP_DIRS,
    max_file_size: int | None = None,
) -> Iterator[Path]:
    """
    Walk a directory tree and yield files to analyze.

    Directories and files are visited in sorted name order so the sequence
    is stable across runs. Symbolic links to directories are not followed.
    Only regular files are yielded.

    Args:
        root: Workspace root (must be a directory).
        accept: Predicate deciding whether a file is included (default: all).
        skip_dirs: Directory names to prune.
        max_file_size: Skip files larger than this many bytes.

    Yields:
        Absolute file paths.

    Raises:
        WorkspaceNotFound: If root is not a directory.
    """
    if not root.is_dir():
        raise WorkspaceNotFound(root)

    def on_error(error: OSError) -> None:
        logger.warning("Cannot list %s: %s", error.filename, error.strerror)

    for dirpath, dirs, files in os.walk(root, onerror=on_error):
        dirs[:] = sorted(d for d in dirs if not should_skip_dir(d, skip_dirs))

        for filename in sorted(files):
            filepath = Path(dirpath) / filename
            if accept is not None and not accept(filepath):
                continue
            try:
                info = stat_file(filepath)
            except FileStatError as e:
                logger.warning("%s", e)
                continue
            # Pipes and devices can block on open
            if not stat.S_ISREG(info.st_mode):
                logger.debug("Skipping %s: not a regular file", filepath)
                continue
            if max_file_size is not None and info.st_size > max_file_size:
                logger.debug("Skipping %s: %d bytes exceeds %d", filepath, info.st_size, max_file_size)
                continue
            yield filepath


def stat_file(filepath: Path) -> os.stat_result:
    """
    Stat a file.

    Raises:
        FileStatError: If the file can't be stat'ed.
    """
    try:
        return filepath.stat()
    except OSError as e:
        raise FileStatError(filepath, e.strerror or str(e)) from e


def read_source(filepath: Path) -> str:
    """
    Read a file as UTF-8 text.

    Args:
        filepath: Path to the file.

    Returns:
        File content.

    Raises:
        FileReadError: If the file can't be read or isn't valid UTF-8.
    """
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise FileReadError(filepath, f"not valid UTF-8 ({e.reason})") from e
    except OSError as e:
        raise FileReadError(filepath, e.strerror or str(e)) from e


def relative_path(filepath: Path, root: Path) -> str:
    """Path of a file relative to the workspace root, with forward slashes."""
    try:
        return filepath.relative_to(root).as_posix()
    except ValueError:
        return filepath.as_posix()


def percentage(part: float, total: float, digits: int = 2) -> float:
    """
    Compute ``part / total * 100`` rounded to `digits`, or 0 when total is 0.
    """
    if total == 0:
        return 0
    return round(part / total * 100, digits)
