"""
Language classification for codebase_audit.

Two independent tables are kept: one for duplicate detection (programming
languages only) and one for code metrics (every file, unknown ones as
``other``).
"""

from codebase_audit.languages.base import EMPTY_PROFILE, Language, LanguageProfile, LanguageTable
from codebase_audit.languages.duplicates import DUPLICATE_LANGUAGES
from codebase_audit.languages.metrics import METRICS_LANGUAGES

__all__ = [
    "DUPLICATE_LANGUAGES",
    "EMPTY_PROFILE",
    "METRICS_LANGUAGES",
    "Language",
    "LanguageProfile",
    "LanguageTable",
]
