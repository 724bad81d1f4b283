"""
Tokenizer feeding the similarity detector.
"""

from __future__ import annotations

import re

DELIMITERS_RE = re.compile(r"[{}();,.\[\]]")
MIN_TOKEN_LENGTH = 2


def tokenize(text: str) -> list[str]:
    """
    Split text into lower-cased tokens.

    Delimiters ``{}();,.[]`` become spaces, the text is split on whitespace
    and tokens shorter than two characters are dropped. Order and repeats
    are kept; the similarity detector only looks at the distinct tokens.

    Args:
        text: File or block text.

    Returns:
        Token list.
    """
    return [
        token.lower()
        for token in DELIMITERS_RE.sub(" ", text).split()
        if len(token) >= MIN_TOKEN_LENGTH
    ]
