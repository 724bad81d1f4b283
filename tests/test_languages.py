"""Tests for the language tables."""

from __future__ import annotations

import pytest

from codebase_audit.languages import (
    DUPLICATE_LANGUAGES,
    EMPTY_PROFILE,
    METRICS_LANGUAGES,
    Language,
    LanguageProfile,
    LanguageTable,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("main.py", Language.PYTHON),
        ("App.TSX", Language.JAVASCRIPT),
        ("lib.rs", Language.RUST),
        ("header.hpp", Language.CPP),
        ("README.md", Language.UNKNOWN),
        ("Makefile", Language.UNKNOWN),
    ],
)
def test_duplicate_table_classify(name, expected):
    assert DUPLICATE_LANGUAGES.classify(name) is expected


@pytest.mark.parametrize(
    "name, expected",
    [
        ("main.py", Language.PYTHON),
        ("component.tsx", Language.TYPESCRIPT),
        ("index.mjs", Language.JAVASCRIPT),
        ("Makefile", Language.MAKEFILE),
        ("Dockerfile", Language.DOCKERFILE),
        (".env", Language.CONFIG),
        ("notes.md", Language.MARKDOWN),
        ("photo.jpeg", Language.OTHER),
        ("noextension", Language.OTHER),
    ],
)
def test_metrics_table_classify(name, expected):
    assert METRICS_LANGUAGES.classify(name) is expected


def test_tables_are_independent():
    assert len(DUPLICATE_LANGUAGES.languages()) == 12
    assert len(METRICS_LANGUAGES.languages()) > len(DUPLICATE_LANGUAGES.languages())
    assert Language.HTML not in DUPLICATE_LANGUAGES.languages()


def test_is_supported_uses_fallback():
    assert DUPLICATE_LANGUAGES.is_supported("src/app.go")
    assert not DUPLICATE_LANGUAGES.is_supported("docs/guide.txt")


def test_missing_profile_is_empty_default():
    assert METRICS_LANGUAGES.profile(Language.JSON) is EMPTY_PROFILE
    assert DUPLICATE_LANGUAGES.profile(Language.UNKNOWN) is EMPTY_PROFILE


def test_first_registration_wins():
    table = LanguageTable("test", fallback=Language.OTHER)
    table.register(Language.CPP, [".h"])
    table.register(Language.CSHARP, [".h"])

    assert table.classify("x.h") is Language.CPP


def test_basenames_only_matched_when_enabled():
    profile = LanguageProfile(comment_prefixes=("#",))
    plain = LanguageTable("plain", fallback=Language.OTHER)
    plain.register(Language.MAKEFILE, ["Makefile", ".mk"], profile)
    named = LanguageTable("named", fallback=Language.OTHER, match_basenames=True)
    named.register(Language.MAKEFILE, ["Makefile", ".mk"], profile)

    assert plain.classify("Makefile") is Language.OTHER
    assert named.classify("makefile") is Language.MAKEFILE
    assert plain.classify("rules.mk") is Language.MAKEFILE
    assert plain.patterns(Language.MAKEFILE) == ("Makefile", ".mk")


def test_language_str_is_value():
    assert str(Language.CSHARP) == "csharp"


def test_typescript_files_use_typescript_profile():
    profile = METRICS_LANGUAGES.profile(METRICS_LANGUAGES.classify("types.d.ts"))

    assert METRICS_LANGUAGES.classify("types.d.ts") is Language.TYPESCRIPT
    assert profile.count_classes("export interface User {}\ntype Id = string;\n") == 2
