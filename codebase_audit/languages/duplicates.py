"""
Language table for duplicate detection.

Covers the programming languages whose files are compared for duplication.
Files with any other extension are not analyzed. Only comment prefixes are
needed here: they decide which lines break a code block.
"""

from __future__ import annotations

from codebase_audit.languages.base import Language, LanguageProfile, LanguageTable

C_STYLE = ("//", "/*", "*/")

DUPLICATE_LANGUAGES = LanguageTable("duplicates", fallback=Language.UNKNOWN)

DUPLICATE_LANGUAGES.register(
    Language.JAVASCRIPT,
    [".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs"],
    LanguageProfile(comment_prefixes=("//", "/*", "*/", "/**")),
)
DUPLICATE_LANGUAGES.register(
    Language.PYTHON,
    [".py", ".pyx", ".pyi"],
    LanguageProfile(comment_prefixes=("#", '"""', "'''")),
)
DUPLICATE_LANGUAGES.register(Language.JAVA, [".java"], LanguageProfile(comment_prefixes=C_STYLE))
DUPLICATE_LANGUAGES.register(Language.CSHARP, [".cs"], LanguageProfile(comment_prefixes=C_STYLE))
DUPLICATE_LANGUAGES.register(
    Language.CPP,
    [".cpp", ".cc", ".cxx", ".c", ".h", ".hpp"],
    LanguageProfile(comment_prefixes=C_STYLE),
)
DUPLICATE_LANGUAGES.register(Language.GO, [".go"], LanguageProfile(comment_prefixes=C_STYLE))
DUPLICATE_LANGUAGES.register(Language.RUST, [".rs"], LanguageProfile(comment_prefixes=C_STYLE))
DUPLICATE_LANGUAGES.register(
    Language.PHP,
    [".php"],
    LanguageProfile(comment_prefixes=("//", "#", "/*", "*/")),
)
DUPLICATE_LANGUAGES.register(Language.RUBY, [".rb"], LanguageProfile(comment_prefixes=("#",)))
DUPLICATE_LANGUAGES.register(Language.SWIFT, [".swift"], LanguageProfile(comment_prefixes=C_STYLE))
DUPLICATE_LANGUAGES.register(Language.KOTLIN, [".kt", ".kts"], LanguageProfile(comment_prefixes=C_STYLE))
DUPLICATE_LANGUAGES.register(Language.SCALA, [".scala"], LanguageProfile(comment_prefixes=C_STYLE))
