"""
Language enumeration, per-language profiles and lookup tables.

A `LanguageTable` maps file names to a `Language` and each language to the
`LanguageProfile` holding its comment prefixes, declaration patterns and
complexity keywords. The duplicate detector and the metrics scanner each own
an independent table; see `codebase_audit.languages.duplicates` and
`codebase_audit.languages.metrics`.

Example:
    table = LanguageTable("example", fallback=Language.OTHER)
    table.register(Language.LUA, [".lua"], profile=LanguageProfile(comment_prefixes=("--",)))
"""

from __future__ import annotations

import functools
import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from re import Pattern
    from typing import Iterable

logger = logging.getLogger(__name__)


class Language(str, Enum):
    """Every language tag either table can produce."""

    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    PYTHON = "python"
    JAVA = "java"
    CSHARP = "csharp"
    CPP = "cpp"
    GO = "go"
    RUST = "rust"
    PHP = "php"
    RUBY = "ruby"
    SWIFT = "swift"
    KOTLIN = "kotlin"
    SCALA = "scala"
    HTML = "html"
    CSS = "css"
    JSON = "json"
    YAML = "yaml"
    XML = "xml"
    MARKDOWN = "markdown"
    SHELL = "shell"
    SQL = "sql"
    R = "r"
    MATLAB = "matlab"
    PERL = "perl"
    LUA = "lua"
    DART = "dart"
    ELIXIR = "elixir"
    ERLANG = "erlang"
    HASKELL = "haskell"
    CLOJURE = "clojure"
    FSHARP = "fsharp"
    OCAML = "ocaml"
    NIM = "nim"
    CRYSTAL = "crystal"
    ZIG = "zig"
    ASSEMBLY = "assembly"
    MAKEFILE = "makefile"
    DOCKERFILE = "dockerfile"
    CONFIG = "config"
    TEXT = "text"
    OTHER = "other"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


@functools.lru_cache(maxsize=None)
def _compile(pattern: str) -> Pattern[str]:
    return re.compile(pattern)


@functools.lru_cache(maxsize=None)
def _keyword_patterns(keywords: tuple[str, ...]) -> tuple[Pattern[str], ...]:
    return tuple(re.compile(rf"\b{re.escape(keyword)}\b") for keyword in keywords)


@dataclass(frozen=True)
class LanguageProfile:
    """
    Text-level rules for one language.

    All counts are heuristic matches over raw text; occurrences inside string
    literals and comments are counted too.
    """

    comment_prefixes: tuple[str, ...] = ()
    function_pattern: str | None = None
    class_pattern: str | None = None
    complexity_keywords: tuple[str, ...] = ()

    def is_comment(self, trimmed_line: str) -> bool:
        """Check whether an already-trimmed line starts with a comment prefix."""
        return trimmed_line.startswith(self.comment_prefixes) if self.comment_prefixes else False

    def count_functions(self, content: str) -> int:
        """Count function-like declarations."""
        return self._count(self.function_pattern, content)

    def count_classes(self, content: str) -> int:
        """Count class/type-like declarations."""
        return self._count(self.class_pattern, content)

    def complexity(self, content: str) -> int:
        """Approximate cyclomatic complexity: 1 plus every keyword occurrence."""
        score = 1
        for pattern in _keyword_patterns(self.complexity_keywords):
            score += sum(1 for _ in pattern.finditer(content))
        return score

    def _count(self, pattern: str | None, content: str) -> int:
        if not pattern:
            return 0
        try:
            return sum(1 for _ in _compile(pattern).finditer(content))
        except re.error as e:
            logger.warning("Invalid structure pattern %r: %s", pattern, e)
            return 0


# Profile used for any language a table has no rules for
EMPTY_PROFILE = LanguageProfile()


class LanguageTable:
    """
    Static mapping from file names to languages and languages to profiles.

    Lookup order: exact basename match (case-insensitive, only when
    `match_basenames` is set), then lower-cased extension match. Both scan
    languages in registration order, so the first registered language wins
    when an extension is listed twice.
    """

    def __init__(self, name: str, fallback: Language, match_basenames: bool = False) -> None:
        """
        Initialize an empty table.

        Args:
            name: Table name, used in log messages.
            fallback: Language returned when nothing matches.
            match_basenames: Also compare whole file names against the patterns.
        """
        self.name = name
        self.fallback = fallback
        self.match_basenames = match_basenames
        self._patterns: dict[Language, tuple[str, ...]] = {}
        self._extension_map: dict[str, Language] = {}
        self._basename_map: dict[str, Language] = {}
        self._profiles: dict[Language, LanguageProfile] = {}

    def register(
        self,
        language: Language,
        patterns: Iterable[str],
        profile: LanguageProfile | None = None,
    ) -> None:
        """
        Register a language.

        Args:
            language: Language tag.
            patterns: Extensions (".py") and, for basename-matching tables,
                whole file names ("Makefile").
            profile: Comment/structure/complexity rules for the language.
        """
        patterns = tuple(patterns)
        self._patterns[language] = patterns
        if profile is not None:
            self._profiles[language] = profile

        for pattern in patterns:
            # First registration wins, mirroring ordered lookup
            if pattern.startswith("."):
                self._extension_map.setdefault(pattern.lower(), language)
            if self.match_basenames:
                self._basename_map.setdefault(pattern.lower(), language)

        logger.debug("Registered %s language %s: %s", self.name, language.value, list(patterns))

    def classify(self, path: Path | str) -> Language:
        """
        Map a file path to a language.

        Args:
            path: File path (only the final component is inspected).

        Returns:
            The matching language, or the table's fallback.
        """
        name = Path(path).name
        if self.match_basenames:
            language = self._basename_map.get(name.lower())
            if language is not None:
                return language

        return self._extension_map.get(Path(name).suffix.lower(), self.fallback)

    def is_supported(self, path: Path | str) -> bool:
        """Check whether a file maps to a registered language."""
        return self.classify(path) is not self.fallback

    def profile(self, language: Language) -> LanguageProfile:
        """Get the profile for a language, or the empty default profile."""
        return self._profiles.get(language, EMPTY_PROFILE)

    def languages(self) -> list[Language]:
        """List registered languages in registration order."""
        return list(self._patterns)

    def patterns(self, language: Language) -> tuple[str, ...]:
        """Get the registered patterns for a language."""
        return self._patterns.get(language, ())
