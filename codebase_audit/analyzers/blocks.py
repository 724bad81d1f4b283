"""
Code block extraction.

A block is a maximal run of consecutive lines that are neither blank nor
comment lines. Runs shorter than the minimum are dropped.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from codebase_audit.models import CodeBlock
from codebase_audit.utils import hash_text

if TYPE_CHECKING:
    from typing import Sequence

    from codebase_audit.languages import LanguageProfile


def extract_blocks(
    lines: Sequence[str],
    profile: LanguageProfile,
    min_lines: int,
) -> list[CodeBlock]:
    """
    Segment a file into code blocks.

    Block lines are stored trimmed. The block hash is taken over those lines
    joined with newlines, without the comment/case normalization used for
    whole-file hashes.

    Args:
        lines: File lines.
        profile: Language profile supplying the comment prefixes.
        min_lines: Minimum block length.

    Returns:
        Blocks in file order.
    """
    blocks: list[CodeBlock] = []
    current: list[str] = []
    start = 0

    for index, raw in enumerate(lines):
        line = raw.strip()
        if line and not profile.is_comment(line):
            if not current:
                start = index
            current.append(line)
            continue

        if len(current) >= min_lines:
            blocks.append(_make_block(current, start, index))
        current = []

    if len(current) >= min_lines:
        blocks.append(_make_block(current, start, len(lines)))

    return blocks


def _make_block(lines: list[str], start_index: int, end_line: int) -> CodeBlock:
    """Build a block from a run starting at 0-based `start_index`."""
    return CodeBlock(
        start_line=start_index + 1,
        end_line=end_line,
        lines=tuple(lines),
        hash=hash_text("\n".join(lines)),
    )
