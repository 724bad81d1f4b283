"""
Content normalization for file-level duplicate hashing.

Comment markers are stripped without any knowledge of string literals, so a
``//`` or ``#`` inside a string also truncates the line. Both files of a pair
are normalized the same way, which keeps hashes comparable.
"""

from __future__ import annotations

import re

from codebase_audit.utils import hash_text

BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
SLASH_COMMENT_RE = re.compile(r"//.*$", re.MULTILINE)
HASH_COMMENT_RE = re.compile(r"#.*$", re.MULTILINE)
WHITESPACE_RE = re.compile(r"\s+")


def normalize_content(content: str) -> str:
    """
    Normalize file content for hashing.

    Removes ``/* ... */`` comments, then ``//`` and ``#`` comments to end of
    line, collapses whitespace runs to one space, trims and lower-cases.

    Args:
        content: Raw file content.

    Returns:
        Normalized text.
    """
    text = BLOCK_COMMENT_RE.sub("", content)
    text = SLASH_COMMENT_RE.sub("", text)
    text = HASH_COMMENT_RE.sub("", text)
    return WHITESPACE_RE.sub(" ", text).strip().lower()


def content_hash(content: str) -> str:
    """Hash of the normalized content of a file."""
    return hash_text(normalize_content(content))
