"""
Language table for code metrics.

Broader than the duplicate-detection table: it also recognizes markup,
data and build files, matches whole file names such as ``Makefile`` and
``Dockerfile``, and buckets everything else as ``other``. Structure
patterns and complexity keywords exist only for programming languages;
every other language counts zero functions/classes and complexity 1.
"""

from __future__ import annotations

from codebase_audit.languages.base import Language, LanguageProfile, LanguageTable

C_BLOCK = ("//", "/*", "*/", "/**", "*")
C_LINE = ("//", "/*", "*/", "*")
MARKUP = ("<!--", "-->", "<!")

C_FAMILY_KEYWORDS = ("if", "else", "for", "while", "do", "switch", "case", "catch", "finally", "&&", "||", "?")
JS_KEYWORDS = C_FAMILY_KEYWORDS + ("forEach", "map", "filter", "reduce")

JS_FUNCTION = (
    r"(?:function\s+\w+\s*\("
    r"|const\s+\w+\s*=\s*(?:\([^)]*\)\s*=>|async\s*\([^)]*\)\s*=>|function)"
    r"|let\s+\w+\s*=\s*(?:\([^)]*\)\s*=>|async\s*\([^)]*\)\s*=>|function)"
    r"|var\s+\w+\s*=\s*(?:\([^)]*\)\s*=>|function)"
    r"|\w+\s*:\s*(?:\([^)]*\)\s*=>|async\s*\([^)]*\)\s*=>|function)"
    r"|async\s+function\s+\w+"
    r"|export\s+(?:async\s+)?function\s+\w+"
    r"|export\s+const\s+\w+\s*=\s*(?:\([^)]*\)\s*=>|function))"
)
JS_CLASS = r"(?:class\s+\w+|export\s+class\s+\w+|export\s+default\s+class\s+\w+)"

TS_FUNCTION = (
    r"(?:function\s+\w+\s*\("
    r"|const\s+\w+\s*:\s*[^=]*=\s*(?:\([^)]*\)\s*=>|async\s*\([^)]*\)\s*=>|function)"
    r"|let\s+\w+\s*:\s*[^=]*=\s*(?:\([^)]*\)\s*=>|function)"
    r"|var\s+\w+\s*:\s*[^=]*=\s*(?:\([^)]*\)\s*=>|function)"
    r"|\w+\s*:\s*(?:\([^)]*\)\s*=>|function)"
    r"|async\s+function\s+\w+"
    r"|export\s+(?:async\s+)?function\s+\w+"
    r"|export\s+const\s+\w+\s*:\s*[^=]*=\s*(?:\([^)]*\)\s*=>|function)"
    r"|private\s+\w+\s*\(|public\s+\w+\s*\(|protected\s+\w+\s*\()"
)
TS_CLASS = (
    r"(?:class\s+\w+|export\s+class\s+\w+|export\s+default\s+class\s+\w+"
    r"|interface\s+\w+|type\s+\w+\s*=)"
)

METRICS_LANGUAGES = LanguageTable("metrics", fallback=Language.OTHER, match_basenames=True)

_register = METRICS_LANGUAGES.register

_register(
    Language.JAVASCRIPT,
    [".js", ".jsx", ".mjs", ".cjs", ".vue"],
    LanguageProfile(C_BLOCK, JS_FUNCTION, JS_CLASS, JS_KEYWORDS),
)
_register(
    Language.TYPESCRIPT,
    [".ts", ".tsx", ".d.ts"],
    LanguageProfile(C_BLOCK, TS_FUNCTION, TS_CLASS, JS_KEYWORDS),
)
_register(
    Language.PYTHON,
    [".py", ".pyx", ".pyi", ".pyc", ".pyo", ".pyw"],
    LanguageProfile(
        ("#", '"""', "'''"),
        r"def\s+\w+\s*\(",
        r"class\s+\w+",
        ("if", "elif", "else", "for", "while", "try", "except", "finally", "and", "or", "with"),
    ),
)
_register(
    Language.JAVA,
    [".java", ".class", ".jar"],
    LanguageProfile(
        C_BLOCK,
        r"(?:public|private|protected)?\s*(?:static\s+)?(?:\w+\s+)*\w+\s*\([^)]*\)\s*\{",
        r"(?:public\s+)?(?:class|interface|enum)\s+\w+",
        C_FAMILY_KEYWORDS,
    ),
)
_register(
    Language.CSHARP,
    [".cs", ".vb", ".fs", ".dll"],
    LanguageProfile(
        C_BLOCK,
        r"(?:public|private|protected|internal)?\s*(?:static\s+)?(?:\w+\s+)*\w+\s*\([^)]*\)\s*\{",
        r"(?:public\s+)?(?:class|interface|struct|enum)\s+\w+",
        C_FAMILY_KEYWORDS,
    ),
)
_register(
    Language.CPP,
    [".cpp", ".cc", ".cxx", ".c", ".h", ".hpp", ".hxx", ".c++", ".h++"],
    LanguageProfile(
        C_LINE,
        r"(?:\w+\s+)*\w+\s*\([^)]*\)\s*\{",
        r"(?:class|struct)\s+\w+",
        ("if", "else", "for", "while", "do", "switch", "case", "catch", "&&", "||", "?"),
    ),
)
_register(
    Language.GO,
    [".go", ".mod", ".sum"],
    LanguageProfile(
        C_LINE,
        r"func\s+(?:\(\w+\s+\*?\w+\)\s+)?\w+\s*\(",
        r"type\s+\w+\s+(?:struct|interface)",
        ("if", "else", "for", "switch", "case", "select", "&&", "||"),
    ),
)
_register(
    Language.RUST,
    [".rs", ".toml"],
    LanguageProfile(
        C_LINE,
        r"fn\s+\w+\s*\(",
        r"(?:struct|enum|trait|impl)\s+\w+",
        ("if", "else", "for", "while", "loop", "match", "&&", "||"),
    ),
)
_register(
    Language.PHP,
    [".php", ".phtml", ".php3", ".php4", ".php5", ".phps"],
    LanguageProfile(
        ("//", "#", "/*", "*/", "*"),
        r"function\s+\w+\s*\(",
        r"(?:class|interface|trait)\s+\w+",
        ("if", "else", "elseif", "for", "while", "do", "switch", "case", "catch", "finally", "&&", "||", "?"),
    ),
)
_register(
    Language.RUBY,
    [".rb", ".rbw", ".rake", ".gemspec"],
    LanguageProfile(
        ("#", "=begin", "=end"),
        r"def\s+\w+",
        r"class\s+\w+",
        ("if", "else", "elsif", "for", "while", "case", "when", "rescue", "and", "or"),
    ),
)
_register(
    Language.SWIFT,
    [".swift"],
    LanguageProfile(
        C_BLOCK,
        r"func\s+\w+\s*\(",
        r"(?:class|struct|enum|protocol)\s+\w+",
        ("if", "else", "for", "while", "switch", "case", "catch", "&&", "||", "?"),
    ),
)
_register(
    Language.KOTLIN,
    [".kt", ".kts"],
    LanguageProfile(
        C_BLOCK,
        complexity_keywords=("if", "else", "for", "while", "when", "try", "catch", "finally", "&&", "||", "?"),
    ),
)
_register(
    Language.SCALA,
    [".scala", ".sc"],
    LanguageProfile(
        C_BLOCK,
        complexity_keywords=("if", "else", "for", "while", "match", "case", "try", "catch", "finally", "&&", "||"),
    ),
)
_register(Language.HTML, [".html", ".htm", ".xhtml", ".shtml"], LanguageProfile(MARKUP))
_register(Language.CSS, [".css", ".scss", ".sass", ".less", ".styl", ".stylus"], LanguageProfile(("/*", "*/", "*")))
_register(Language.JSON, [".json", ".jsonc", ".json5"])
_register(Language.YAML, [".yml", ".yaml"], LanguageProfile(("#",)))
_register(Language.XML, [".xml", ".xsd", ".xsl", ".xslt", ".svg"], LanguageProfile(MARKUP))
_register(Language.MARKDOWN, [".md", ".markdown", ".mdown", ".mkd", ".mdx"], LanguageProfile(MARKUP))
_register(
    Language.SHELL,
    [".sh", ".bash", ".zsh", ".fish", ".bat", ".cmd", ".ps1"],
    LanguageProfile(("#",)),
)
_register(Language.SQL, [".sql", ".mysql", ".pgsql", ".sqlite"], LanguageProfile(("--", "/*", "*/", "*")))
_register(Language.R, [".r", ".R", ".rmd", ".Rmd"])
_register(Language.MATLAB, [".m", ".mat"])
_register(Language.PERL, [".pl", ".pm", ".perl"])
_register(Language.LUA, [".lua"])
_register(Language.DART, [".dart"])
_register(Language.ELIXIR, [".ex", ".exs"])
_register(Language.ERLANG, [".erl", ".hrl"])
_register(Language.HASKELL, [".hs", ".lhs"])
_register(Language.CLOJURE, [".clj", ".cljs", ".cljc"])
_register(Language.FSHARP, [".fs", ".fsi", ".fsx"])
_register(Language.OCAML, [".ml", ".mli"])
_register(Language.NIM, [".nim", ".nims"])
_register(Language.CRYSTAL, [".cr"])
_register(Language.ZIG, [".zig"])
_register(Language.ASSEMBLY, [".asm", ".s"])
_register(Language.MAKEFILE, ["Makefile", "makefile", ".mk"], LanguageProfile(("#",)))
_register(Language.DOCKERFILE, ["Dockerfile", ".dockerfile"], LanguageProfile(("#",)))
_register(
    Language.CONFIG,
    [".conf", ".config", ".ini", ".cfg", ".properties", ".env"],
    LanguageProfile(("#", ";", "//")),
)
_register(Language.TEXT, [".txt", ".log", ".readme"])
