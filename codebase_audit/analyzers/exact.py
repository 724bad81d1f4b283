"""
Exact duplicate detection.

Files are grouped by the hash of their normalized content, blocks by the
hash of their raw trimmed lines.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from codebase_audit.models import DuplicateGroup, DuplicateKind, DuplicateMember

if TYPE_CHECKING:
    from typing import Sequence

    from codebase_audit.models import CodeBlock, FileRecord


def find_exact_file_duplicates(records: Sequence[FileRecord]) -> list[DuplicateGroup]:
    """
    Group files with identical normalized content.

    Args:
        records: Analyzed files in discovery order.

    Returns:
        One group per hash shared by two or more files, in first-seen order.
    """
    by_hash: dict[str, list[FileRecord]] = {}
    for record in records:
        by_hash.setdefault(record.content_hash, []).append(record)

    groups = []
    for digest, members in by_hash.items():
        if len(members) < 2:
            continue
        groups.append(DuplicateGroup(
            kind=DuplicateKind.EXACT_FILE,
            members=tuple(DuplicateMember.for_file(record) for record in members),
            similarity=1.0,
            duplicate_lines=members[0].lines,
            hash=digest,
        ))
    return groups


def find_exact_block_duplicates(records: Sequence[FileRecord]) -> list[DuplicateGroup]:
    """
    Group code blocks with identical lines, across and within files.

    Args:
        records: Analyzed files in discovery order.

    Returns:
        One group per block hash shared by two or more blocks, in first-seen
        order. Each group carries the shared block text.
    """
    by_hash: dict[str, list[tuple[FileRecord, CodeBlock]]] = {}
    for record in records:
        for block in record.blocks:
            by_hash.setdefault(block.hash, []).append((record, block))

    groups = []
    for digest, occurrences in by_hash.items():
        if len(occurrences) < 2:
            continue
        first_block = occurrences[0][1]
        groups.append(DuplicateGroup(
            kind=DuplicateKind.EXACT_BLOCK,
            members=tuple(DuplicateMember.for_block(record, block) for record, block in occurrences),
            similarity=1.0,
            duplicate_lines=first_block.line_count,
            hash=digest,
            content=first_block.content,
        ))
    return groups
